from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from tipsy.api.error import raise_for_error
from tipsy.app.services.email_sender import IEmailSender
from tipsy.app.services.token_service import TokenClaims, TokenService
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.app.use_cases.auth import (
    AuthResponse,
    ChangePasswordUseCase,
    ForgotPasswordUseCase,
    GetMeUseCase,
    LoginUseCase,
    MeResponse,
    MessageResponse,
    RegisterCommand,
    RegisterUseCase,
    ResetPasswordUseCase,
)
from tipsy.depends import (
    get_current_user,
    get_email_sender,
    get_frontend_url,
    get_token_service,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Fields are optional here so that missing values are reported by the
    use case with the same 400 VALIDATION_ERROR as malformed ones.
    """

    username: Optional[str] = Field(None, description="Username (min 3 chars)")
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="Password (min 8 chars)")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Create a customer account and return it with a JWT.

    Raises:
        - 400 Bad Request: Missing or invalid field
        - 409 Conflict: Username or email already in use
        - 500 Internal Server Error: Server error
    """
    command = RegisterCommand(
        username=request.username, email=request.email, password=request.password
    )

    use_case = RegisterUseCase(uow, token_service)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload, login is a username or an email"""

    login: Optional[str] = Field(None, description="Username or email")
    password: Optional[str] = Field(None, description="Password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Authenticate and return a JWT.

    Raises:
        - 400 Bad Request: Missing login or password
        - 401 Unauthorized: Invalid credentials (same error for unknown user)
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow, token_service)
    result = await use_case.execute(request.login, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def me(
    current_user: TokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current user as stored in the database.

    Raises:
        - 401 Unauthorized: Missing or expired token
        - 403 Forbidden: Invalid token
        - 404 Not Found: User deleted since the token was issued
    """
    use_case = GetMeUseCase(uow)
    result = await use_case.execute(current_user.id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


@router.post("/change-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: TokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change the authenticated user's password.

    Raises:
        - 400 Bad Request: Missing field or new password too short
        - 401 Unauthorized: Current password incorrect
        - 404 Not Found: User deleted since the token was issued
    """
    use_case = ChangePasswordUseCase(uow)
    result = await use_case.execute(
        current_user.id, request.current_password, request.new_password
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = Field(None, description="Account email address")


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
    frontend_url: str = Depends(get_frontend_url),
):
    """
    Send a password reset link.

    Security:
        - No email enumeration (same response for known and unknown emails)
        - Token is 32 random bytes, stored hashed, valid for 1 hour

    Returns:
        - 200 OK: Always, once the email field is present
        - 400 Bad Request: Missing email
    """
    use_case = ForgotPasswordUseCase(uow, email_sender, frontend_url)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = Field(None, description="Reset token from the email link")
    password: Optional[str] = Field(None, description="New password (min 8 chars)")


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Set a new password using a reset token.

    Raises:
        - 400 Bad Request: Missing field, short password, or a token that is
          wrong, expired or already used (one error for all three)
    """
    use_case = ResetPasswordUseCase(uow)
    result = await use_case.execute(request.token, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
