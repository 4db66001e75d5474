"""
Login Use Case

Authenticates by username or email and returns a JWT.
"""

import logging

from tipsy.app.services.password_hasher import burn_verification, verify_password
from tipsy.app.services.token_service import TokenService
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.libs.result import Error, Result, Return
from .dtos import AuthResponse, UserInfo
from .validation import require, validation_error

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid login or password")


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - login matches username or email, case-insensitively
    - Unknown user and wrong password share one error
    - A bcrypt check runs even for unknown users (no timing oracle)
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, login: str, password: str) -> Result[AuthResponse]:
        if not require(login, password):
            return validation_error("Login and password are required")

        async with self.uow:
            user = await self.uow.users.get_by_login(login)

            if user is None:
                burn_verification(password)
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            logger.info(f"User logged in: {user.username}")

            return Return.ok(
                AuthResponse(
                    user=UserInfo.from_entity(user), token=self.token_service.issue(user)
                )
            )
