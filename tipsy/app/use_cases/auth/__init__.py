"""
Authentication Use Cases

All account-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .get_me_use_case import GetMeUseCase
from .change_password_use_case import ChangePasswordUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import (
    AuthResponse,
    MeResponse,
    MessageResponse,
    RegisterCommand,
    UserInfo,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "GetMeUseCase",
    "ChangePasswordUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "AuthResponse",
    "MeResponse",
    "MessageResponse",
    # DTOs - Nested Models
    "UserInfo",
]
