"""
Register Use Case

Creates a customer account and logs it in.
"""

import logging

from tipsy.app.repositories.user_repository import DuplicateUserError
from tipsy.app.services.password_hasher import hash_password
from tipsy.app.services.token_service import TokenService
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.domain.entities import User, UserRole
from tipsy.libs.result import Error, Result, Return
from .dtos import AuthResponse, RegisterCommand, UserInfo
from .validation import (
    require,
    validate_email,
    validate_password,
    validate_username,
    validation_error,
)

logger = logging.getLogger(__name__)

# Same message whichever identifier is taken
USER_ALREADY_EXISTS = Error("CONFLICT", "Username or email is already in use")


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Validate username (>= 3), password (>= 8), email format
    2. Reject if username or email exists, case-insensitively
    3. Hash password with bcrypt cost factor 10
    4. Create User with role=user; a unique index race is a conflict too
    5. Commit and issue a JWT
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        if not require(command.username, command.email, command.password):
            return validation_error("Username, email and password are required")

        for check in (
            validate_username(command.username),
            validate_password(command.password),
            validate_email(command.email),
        ):
            if check.is_err():
                return check

        async with self.uow:
            if await self.uow.users.exists_by_username_or_email(
                command.username, command.email
            ):
                return Return.err(USER_ALREADY_EXISTS)

            user = User(
                username=command.username,
                email=command.email,
                password_hash=hash_password(command.password),
                role=UserRole.user,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateUserError:
                logger.info("Registration lost a uniqueness race, reporting conflict")
                return Return.err(USER_ALREADY_EXISTS)

            await self.uow.commit()

            logger.info(f"New user registered: {user.username}")

            return Return.ok(
                AuthResponse(
                    user=UserInfo.from_entity(user), token=self.token_service.issue(user)
                )
            )
