"""
Change Password Use Case

Lets an authenticated user replace their password.
"""

import logging

from tipsy.app.services.password_hasher import hash_password, verify_password
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.libs.result import Error, Result, Return
from .dtos import MessageResponse
from .validation import require, validate_password, validation_error

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Business Rules:
    - Current password must match the stored hash (re-read, not from JWT)
    - New password must be at least 8 characters
    - Any pending reset token is cleared along with the hash change
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: int, current_password: str, new_password: str
    ) -> Result[MessageResponse]:
        if not require(current_password, new_password):
            return validation_error("Current password and new password are required")

        check = validate_password(new_password, field="New password")
        if check.is_err():
            return check

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not verify_password(current_password, user.password_hash):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password is incorrect")
                )

            user = await self.uow.users.update_password_hash(
                user, hash_password(new_password)
            )
            await self.uow.commit()

            logger.info(f"Password changed for user: {user.username}")

            return Return.ok(MessageResponse(message="Password changed successfully"))
