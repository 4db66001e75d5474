"""
FastAPI dependencies.

Collaborators (session factory, token service, email sender) are built in
create_app and read from app.state, so tests can swap them per app.

Auth gates run in order: get_current_user attaches the identity to
request.state, require_role then inspects what was attached.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from tipsy.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tipsy.api.error import ClientError
from tipsy.app.services.email_sender import IEmailSender
from tipsy.app.services.token_service import (
    InvalidTokenError,
    TokenClaims,
    TokenExpiredError,
    TokenService,
)
from tipsy.domain.entities import UserRole
from tipsy.libs.result import Error

# auto_error=False: missing/malformed headers are reported by get_current_user
security = HTTPBearer(auto_error=False)

AUTHENTICATION_REQUIRED = Error("AUTHENTICATION_REQUIRED", "Authentication required")


async def get_session(request: Request) -> AsyncSession:
    async with request.app.state.session_factory() as session:
        yield session


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_email_sender(request: Request) -> IEmailSender:
    return request.app.state.email_sender


def get_frontend_url(request: Request) -> str:
    return request.app.state.config.FRONTEND_URL


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Returns:
        Decoded claims (id, username, email, role)

    Raises:
        ClientError: 401 if the header or token is missing, 401 if the
        token expired, 403 if the token is otherwise invalid
    """
    if credentials is None or not credentials.credentials:
        raise ClientError.from_error(AUTHENTICATION_REQUIRED)

    try:
        claims = token_service.verify(credentials.credentials)
    except TokenExpiredError:
        raise ClientError.from_error(Error("TOKEN_EXPIRED", "Token expired"))
    except InvalidTokenError:
        raise ClientError.from_error(Error("INVALID_TOKEN", "Invalid token"))

    request.state.user = claims
    return claims


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> Optional[TokenClaims]:
    """Like get_current_user, but any failure just means anonymous"""
    claims = None
    if credentials is not None and credentials.credentials:
        try:
            claims = token_service.verify(credentials.credentials)
        except (TokenExpiredError, InvalidTokenError):
            claims = None

    request.state.user = claims
    return claims


def require_role(role: UserRole):
    """
    Build a dependency that only lets `role` through.

    Must be listed after get_current_user (or get_optional_user).
    """

    async def dependency(request: Request) -> TokenClaims:
        user: Optional[TokenClaims] = getattr(request.state, "user", None)
        if user is None:
            raise ClientError.from_error(AUTHENTICATION_REQUIRED)
        if user.role != role:
            raise ClientError.from_error(
                Error("FORBIDDEN", f"{role.value.capitalize()} access required")
            )
        return user

    return dependency


require_admin = require_role(UserRole.admin)
