import pytest

from tipsy.app.use_cases.users import (
    AdminResetPasswordUseCase,
    ChangeRoleUseCase,
    DeleteUserUseCase,
    ListUsersUseCase,
)
from tipsy.domain.entities import UserRole


@pytest.mark.asyncio
async def test_promote_user(mock_uow, alice):
    mock_uow.users.get_by_id.return_value = alice

    async def set_role(user, role):
        user.role = role
        return user

    mock_uow.users.update_role.side_effect = set_role

    result = await ChangeRoleUseCase(mock_uow).execute(99, 1, "admin")

    assert result.is_ok()
    assert result.value.role == "admin"
    mock_uow.users.update_role.assert_called_once_with(alice, UserRole.admin)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_role_is_rejected(mock_uow):
    result = await ChangeRoleUseCase(mock_uow).execute(99, 1, "bartender")

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_admin_cannot_demote_self(mock_uow):
    result = await ChangeRoleUseCase(mock_uow).execute(99, 99, "user")

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.update_role.assert_not_called()


@pytest.mark.asyncio
async def test_change_role_of_missing_user(mock_uow):
    mock_uow.users.get_by_id.return_value = None

    result = await ChangeRoleUseCase(mock_uow).execute(99, 1, "admin")

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_user(mock_uow, alice):
    mock_uow.users.get_by_id.return_value = alice

    result = await DeleteUserUseCase(mock_uow).execute(99, 1)

    assert result.is_ok()
    mock_uow.users.delete.assert_called_once_with(alice)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(mock_uow):
    result = await DeleteUserUseCase(mock_uow).execute(99, 99)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.delete.assert_not_called()


@pytest.mark.asyncio
async def test_admin_reset_password_validates_length(mock_uow):
    result = await AdminResetPasswordUseCase(mock_uow).execute(1, "short12")

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_get_missing_user(mock_uow):
    mock_uow.users.get_by_id.return_value = None

    result = await ListUsersUseCase(mock_uow).get_one(5)

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
