import pytest
from unittest.mock import AsyncMock, MagicMock

from tipsy.app.services.password_hasher import hash_password
from tipsy.domain.entities import User, UserRole

USER_REPOSITORY_METHODS = (
    "get_by_id",
    "get_by_login",
    "get_by_email",
    "exists_by_username_or_email",
    "get_by_reset_token",
    "list_all",
    "create",
    "update_password_hash",
    "redeem_reset_token",
    "update_reset_token",
    "update_role",
    "delete",
)


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    for name in USER_REPOSITORY_METHODS:
        setattr(uow.users, name, AsyncMock())
    return uow


@pytest.fixture(scope="session")
def alice_password_hash():
    # bcrypt is slow on purpose, hash once per run
    return hash_password("password1")


@pytest.fixture
def alice(alice_password_hash):
    return User(
        id=1,
        username="alice",
        email="alice@x.com",
        password_hash=alice_password_hash,
        role=UserRole.user,
    )
