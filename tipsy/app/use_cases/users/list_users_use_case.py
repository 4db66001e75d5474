from typing import List

from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.app.use_cases.auth.dtos import UserInfo
from tipsy.libs.result import Error, Result, Return


class ListUsersUseCase:
    """Read-only user lookups for administrators"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_all(self) -> Result[List[UserInfo]]:
        async with self.uow:
            users = await self.uow.users.list_all()
            return Return.ok([UserInfo.from_entity(u) for u in users])

    async def get_one(self, user_id: int) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            return Return.ok(UserInfo.from_entity(user))
