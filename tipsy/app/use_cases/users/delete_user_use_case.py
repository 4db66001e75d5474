import logging

from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.app.use_cases.auth.dtos import MessageResponse
from tipsy.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    """Removes an account; admins cannot remove their own"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, admin_user_id: int, target_user_id: int) -> Result[MessageResponse]:
        if target_user_id == admin_user_id:
            return Return.err(
                Error("VALIDATION_ERROR", "You cannot delete your own account")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            username = user.username
            await self.uow.users.delete(user)
            await self.uow.commit()

            logger.info(f"User deleted: {username}")

            return Return.ok(MessageResponse(message="User deleted"))
