"""
Change User Role Use Case

Promotes or demotes an account.
"""

import logging

from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.app.use_cases.auth.dtos import UserInfo
from tipsy.domain.entities import UserRole
from tipsy.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class ChangeRoleUseCase:
    """
    Business Rules:
    - Role must be one of: user, admin
    - An admin cannot demote themselves
    - Existing JWTs keep the old role until they expire
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, admin_user_id: int, target_user_id: int, new_role: str
    ) -> Result[UserInfo]:
        try:
            role = UserRole(new_role)
        except ValueError:
            return Return.err(
                Error("VALIDATION_ERROR", 'Invalid role. Use "user" or "admin"')
            )

        if target_user_id == admin_user_id and role != UserRole.admin:
            return Return.err(
                Error("VALIDATION_ERROR", "You cannot change your own role")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            user = await self.uow.users.update_role(user, role)
            await self.uow.commit()

            logger.info(f"User {user.username} role changed to {role.value}")

            return Return.ok(UserInfo.from_entity(user))
