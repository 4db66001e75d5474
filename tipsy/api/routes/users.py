from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from tipsy.api.error import raise_for_error
from tipsy.app.services.token_service import TokenClaims
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.app.use_cases.auth import MessageResponse, UserInfo
from tipsy.app.use_cases.users import (
    AdminResetPasswordUseCase,
    ChangeRoleUseCase,
    DeleteUserUseCase,
    ListUsersUseCase,
)
from tipsy.depends import get_current_user, get_unit_of_work, require_admin

# Order matters: identity is attached before the role gate runs
router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_current_user), Depends(require_admin)],
)


@router.get("", status_code=status.HTTP_200_OK, response_model=List[UserInfo])
async def list_users(uow: UnitOfWork = Depends(get_unit_of_work)):
    """All users, newest first (admin only)"""
    result = await ListUsersUseCase(uow).list_all()
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserInfo)
async def get_user(user_id: int, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await ListUsersUseCase(uow).get_one(user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


class ChangeRoleRequest(BaseModel):
    role: Optional[str] = Field(None, description='"user" or "admin"')


@router.patch("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserInfo)
async def change_role(
    user_id: int,
    request: ChangeRoleRequest,
    admin: TokenClaims = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change a user's role (admin only).

    The user's current JWT keeps its old role until it expires.

    Raises:
        - 400 Bad Request: Invalid role, or an admin demoting themselves
        - 404 Not Found: User not found
    """
    result = await ChangeRoleUseCase(uow).execute(admin.id, user_id, request.role or "")
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{user_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def delete_user(
    user_id: int,
    admin: TokenClaims = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete a user (admin only).

    Raises:
        - 400 Bad Request: Admin deleting their own account
        - 404 Not Found: User not found
    """
    result = await DeleteUserUseCase(uow).execute(admin.id, user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


class AdminResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_password: Optional[str] = Field(None, alias="newPassword")


@router.post(
    "/{user_id}/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
)
async def admin_reset_password(
    user_id: int,
    request: AdminResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Set another user's password (admin only)"""
    result = await AdminResetPasswordUseCase(uow).execute(user_id, request.new_password)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
