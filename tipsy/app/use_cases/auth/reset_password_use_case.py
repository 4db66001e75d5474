"""
Reset Password Use Case

Completes the forgot-password flow with the token from the email.
"""

import logging
from datetime import datetime
from typing import Callable

from tipsy.app.services.reset_token_store import ResetTokenStore
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.domain.base import utcnow
from tipsy.libs.result import Result, Return
from .dtos import MessageResponse
from .validation import require, validate_password, validation_error

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Business Rules:
    - Password is validated before the token is looked at
    - Token must match a stored digest whose expiry is in the future
    - Wrong and expired tokens are reported identically
    - The token is cleared with the password update (single use)
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, token: str, password: str) -> Result[MessageResponse]:
        if not require(token, password):
            return validation_error("Token and new password are required")

        check = validate_password(password)
        if check.is_err():
            return check

        async with self.uow:
            store = ResetTokenStore(self.uow.users, clock=self.clock)
            result = await store.consume(token, password)
            if result.is_err():
                return result

            await self.uow.commit()

            logger.info(f"Password reset successful for user: {result.value.username}")

            return Return.ok(
                MessageResponse(
                    message="Password has been reset successfully. You can now log in."
                )
            )
