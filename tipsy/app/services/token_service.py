"""
JWT access tokens.

Tokens are stateless: verification needs only the signing secret, so a
role change or account deletion only shows up in tokens issued afterwards.
"""

from datetime import UTC, datetime, timedelta
from typing import Callable

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from tipsy.app.errors import ConfigurationError
from tipsy.domain.entities import User, UserRole

DEFAULT_EXPIRES_IN = timedelta(days=7)


class TokenError(Exception):
    """Base class for token verification failures"""


class TokenExpiredError(TokenError):
    """Token signature is valid but exp is in the past"""


class InvalidTokenError(TokenError):
    """Bad signature, malformed token or missing claims"""


class TokenClaims(BaseModel):
    """Identity carried by an access token"""

    id: int
    username: str
    email: str
    role: UserRole


class TokenService:
    """Issues and verifies HS256 access tokens"""

    ALGORITHM = "HS256"

    def __init__(
        self,
        secret: str,
        expires_in: timedelta = DEFAULT_EXPIRES_IN,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not defined")
        self._secret = secret
        self._expires_in = expires_in
        self._clock = clock

    def issue(self, user: User) -> str:
        """
        Generate JWT access token for a user

        Returns:
            JWT token string (HS256) with id, username, email, role, iat, exp
        """
        now = self._clock()
        payload = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": UserRole(user.role).value,
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify and decode JWT token

        Raises:
            TokenExpiredError: token is past its exp claim
            InvalidTokenError: any other verification failure
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.ALGORITHM])
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token expired") from e
        except JWTError as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError("Invalid token claims") from e
