"""
Password reset tokens.

The plaintext token (32 random bytes, hex encoded) only ever leaves the
process inside the reset email. The users table stores its SHA-256 digest
and an expiry one hour out. A fast unsalted digest is enough here because
the secret is random, not chosen by a human.
"""

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Callable

from tipsy.app.repositories.user_repository import IUserRepository
from tipsy.app.services.password_hasher import hash_password
from tipsy.domain.base import utcnow
from tipsy.domain.entities import User
from tipsy.libs.result import Error, Result, Return

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(hours=1)

INVALID_OR_EXPIRED_TOKEN = Error(
    "INVALID_OR_EXPIRED_TOKEN",
    "Invalid or expired reset link. Please request a new one.",
)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class ResetTokenStore:
    """
    Issues and consumes single-use reset tokens on the user record.

    Business Rules:
    - One pending token per user; issuing again overwrites the previous one
    - Wrong and expired tokens produce the same error
    - Consuming sets the new password and clears the token in one update
    """

    def __init__(
        self,
        users: IUserRepository,
        clock: Callable[[], datetime] = utcnow,
        ttl: timedelta = RESET_TOKEN_TTL,
    ):
        self.users = users
        self.clock = clock
        self.ttl = ttl

    async def issue(self, user: User) -> str:
        """
        Generate a reset token for user and persist its digest.

        Returns:
            Plaintext token for delivery to the user
        """
        token = secrets.token_hex(RESET_TOKEN_BYTES)
        await self.users.update_reset_token(
            user, hash_reset_token(token), self.clock() + self.ttl
        )
        return token

    async def consume(self, token: str, new_password: str) -> Result[User]:
        """
        Set new_password for the user holding token, if still valid.

        Returns:
            Result with the updated user, or INVALID_OR_EXPIRED_TOKEN
        """
        digest, now = hash_reset_token(token), self.clock()
        user = await self.users.get_by_reset_token(digest, now)
        if user is None:
            return Return.err(INVALID_OR_EXPIRED_TOKEN)

        # A concurrent request may have redeemed the token since the lookup
        user = await self.users.redeem_reset_token(
            user, digest, now, hash_password(new_password)
        )
        if user is None:
            return Return.err(INVALID_OR_EXPIRED_TOKEN)
        return Return.ok(user)
