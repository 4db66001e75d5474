"""
User Management Use Cases

Administrator operations on accounts.
"""

from .list_users_use_case import ListUsersUseCase
from .change_role_use_case import ChangeRoleUseCase
from .delete_user_use_case import DeleteUserUseCase
from .admin_reset_password_use_case import AdminResetPasswordUseCase

__all__ = [
    "ListUsersUseCase",
    "ChangeRoleUseCase",
    "DeleteUserUseCase",
    "AdminResetPasswordUseCase",
]
