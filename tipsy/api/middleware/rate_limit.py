"""
Rate limiting middleware.

Fixed-window counters held in process memory, keyed by policy and client
address. Counters are not shared between processes: running several
instances multiplies the effective limits.
"""

import logging
import re
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    name: str
    window_seconds: int
    max_requests: int
    message: str
    # Responses below 400 are uncounted once they complete
    skip_successful_requests: bool = False


AUTH_POLICY = RateLimitPolicy(
    name="auth",
    window_seconds=15 * 60,
    max_requests=5,
    message="Too many attempts, please try again in 15 minutes",
    skip_successful_requests=True,
)

GENERAL_POLICY = RateLimitPolicy(
    name="general",
    window_seconds=60,
    max_requests=100,
    message="Too many requests, please slow down",
)

SENSITIVE_POLICY = RateLimitPolicy(
    name="sensitive",
    window_seconds=60 * 60,
    max_requests=10,
    message="Too many attempts for this operation, please try again later",
)

AUTH_ROUTES = {
    ("POST", "/auth/register"),
    ("POST", "/auth/login"),
}

SENSITIVE_ROUTES = {
    ("POST", "/auth/change-password"),
    ("POST", "/auth/forgot-password"),
    ("POST", "/auth/reset-password"),
}

USER_PATH = re.compile(r"^/users/[^/]+/?$")
USER_RESET_PATH = re.compile(r"^/users/[^/]+/reset-password/?$")

UNLIMITED_PATHS = {"/health"}


def resolve_policy(method: str, path: str) -> Optional[RateLimitPolicy]:
    """Pick the single policy that applies to a request, None for exempt paths"""
    if path in UNLIMITED_PATHS:
        return None
    if (method, path) in AUTH_ROUTES:
        return AUTH_POLICY
    if (method, path) in SENSITIVE_ROUTES:
        return SENSITIVE_POLICY
    if method in ("PATCH", "DELETE") and USER_PATH.match(path):
        return SENSITIVE_POLICY
    if method == "POST" and USER_RESET_PATH.match(path):
        return SENSITIVE_POLICY
    return GENERAL_POLICY


@dataclass
class Window:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    limit: int
    remaining: int
    reset_seconds: int


class RateLimiter:
    """Thread-safe fixed-window counters"""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        cleanup_interval: int = 3600,
    ):
        self._windows: Dict[Tuple[str, str], Window] = {}
        self._lock = Lock()
        self._clock = clock
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = clock()

    def hit(self, policy: RateLimitPolicy, key: str) -> RateLimitStatus:
        """
        Count one request for key under policy.

        The hit is counted even when it is rejected, so hammering a blocked
        endpoint keeps it blocked until the window runs out.
        """
        now = self._clock()
        with self._lock:
            if now - self._last_cleanup > self._cleanup_interval:
                self._cleanup(now)

            window = self._windows.get((policy.name, key))
            if window is None or window.reset_at <= now:
                window = Window(count=0, reset_at=now + policy.window_seconds)
                self._windows[(policy.name, key)] = window

            window.count += 1
            return RateLimitStatus(
                allowed=window.count <= policy.max_requests,
                limit=policy.max_requests,
                remaining=max(0, policy.max_requests - window.count),
                reset_seconds=max(0, int(window.reset_at - now + 0.999)),
            )

    def undo(self, policy: RateLimitPolicy, key: str) -> None:
        """Take back one hit from the current window, if it is still open"""
        now = self._clock()
        with self._lock:
            window = self._windows.get((policy.name, key))
            if window is not None and window.reset_at > now and window.count > 0:
                window.count -= 1

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _cleanup(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if w.reset_at <= now]
        for k in expired:
            del self._windows[k]
        self._last_cleanup = now


def client_identifier(request: Request, trust_forwarded: bool = False) -> str:
    """Client IP, optionally taken from X-Forwarded-For behind a trusted proxy"""
    if trust_forwarded:
        forwarded_for = request.headers.get("X-Forwarded-For", "")
        first_ip = forwarded_for.split(",", 1)[0].strip()
        if first_ip:
            return first_ip
    return request.client.host if request.client else "unknown"


def rate_limit_headers(result: RateLimitStatus) -> Dict[str, str]:
    return {
        "RateLimit-Limit": str(result.limit),
        "RateLimit-Remaining": str(result.remaining),
        "RateLimit-Reset": str(result.reset_seconds),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to enforce rate limits on API requests."""

    def __init__(self, app, limiter: RateLimiter, trust_forwarded: bool = False):
        super().__init__(app)
        self.limiter = limiter
        self.trust_forwarded = trust_forwarded

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        policy = resolve_policy(request.method, request.url.path)
        if policy is None:
            return await call_next(request)

        key = client_identifier(request, self.trust_forwarded)
        result = self.limiter.hit(policy, key)
        headers = rate_limit_headers(result)

        if not result.allowed:
            logger.warning(
                f"Rate limit exceeded: policy={policy.name} key={key} "
                f"path={request.url.path}"
            )
            headers["Retry-After"] = str(result.reset_seconds)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": {"code": "RATE_LIMITED", "message": policy.message}},
                headers=headers,
            )

        response = await call_next(request)

        if policy.skip_successful_requests and response.status_code < 400:
            self.limiter.undo(policy, key)
            headers["RateLimit-Remaining"] = str(min(result.limit, result.remaining + 1))

        response.headers.update(headers)
        return response
