import logging

from tipsy.app.services.password_hasher import hash_password
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.app.use_cases.auth.dtos import MessageResponse
from tipsy.app.use_cases.auth.validation import require, validate_password, validation_error
from tipsy.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class AdminResetPasswordUseCase:
    """Sets another user's password without knowing the current one"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, target_user_id: int, new_password: str) -> Result[MessageResponse]:
        if not require(new_password):
            return validation_error("New password is required")

        check = validate_password(new_password, field="New password")
        if check.is_err():
            return check

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            user = await self.uow.users.update_password_hash(
                user, hash_password(new_password)
            )
            await self.uow.commit()

            logger.info(f"Password reset by admin for user: {user.username}")

            return Return.ok(MessageResponse(message="Password reset"))
