from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.libs.result import Error, Result, Return
from .dtos import MeResponse, UserInfo


class GetMeUseCase:
    """Loads the persisted record behind an access token"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: int) -> Result[MeResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(MeResponse(user=UserInfo.from_entity(user)))
