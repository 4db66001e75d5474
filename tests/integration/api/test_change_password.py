import pytest
from httpx import AsyncClient

from tests.fixtures.helpers import bearer, register


@pytest.mark.asyncio
async def test_change_password_then_login_with_new_one(client: AsyncClient, test_data):
    token = (await register(client, test_data.get_copy("alice")))["token"]

    response = await client.post(
        "/auth/change-password",
        json={"currentPassword": "password1", "newPassword": "password2"},
        headers=bearer(token),
    )
    assert response.status_code == 200
    assert "message" in response.json()

    old = await client.post("/auth/login", json={"login": "alice", "password": "password1"})
    new = await client.post("/auth/login", json={"login": "alice", "password": "password2"})
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_wrong_current_password_is_401(client: AsyncClient, test_data):
    token = (await register(client, test_data.get_copy("alice")))["token"]

    response = await client.post(
        "/auth/change-password",
        json={"currentPassword": "not-it-at-all", "newPassword": "password2"},
        headers=bearer(token),
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_short_new_password_is_400(client: AsyncClient, test_data):
    token = (await register(client, test_data.get_copy("alice")))["token"]

    response = await client.post(
        "/auth/change-password",
        json={"currentPassword": "password1", "newPassword": "short12"},
        headers=bearer(token),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient):
    response = await client.post(
        "/auth/change-password",
        json={"currentPassword": "password1", "newPassword": "password2"},
    )

    assert response.status_code == 401
