import pytest
from httpx import AsyncClient

from tipsy.app.services.token_service import TokenService
from tests.fixtures.app_config import IntegrationConfig


@pytest.mark.asyncio
async def test_register_then_login_by_username(client: AsyncClient, test_data):
    """
    Given alice registered with password1
    When she logs in with her username
    Then the token's username claim is alice
    """
    register = await client.post("/auth/register", json=test_data.get_copy("alice"))
    assert register.status_code == 201

    response = await client.post("/auth/login", json={"login": "alice", "password": "password1"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["username"] == "alice"
    claims = TokenService(IntegrationConfig.JWT_SECRET).verify(data["token"])
    assert claims.username == "alice"
    assert claims.email == "alice@x.com"
    assert claims.role.value == "user"


@pytest.mark.asyncio
async def test_login_field_accepts_email_in_any_case(client: AsyncClient, test_data):
    await client.post("/auth/register", json=test_data.get_copy("alice"))

    response = await client.post(
        "/auth/login", json={"login": "ALICE@X.COM", "password": "password1"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["username"] == "alice"


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_look_the_same(client: AsyncClient, test_data):
    await client.post("/auth/register", json=test_data.get_copy("alice"))

    wrong_password = await client.post(
        "/auth/login", json={"login": "alice", "password": "password2"}
    )
    unknown_user = await client.post(
        "/auth/login", json={"login": "nobody", "password": "password1"}
    )

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_missing_password_is_400(client: AsyncClient):
    response = await client.post("/auth/login", json={"login": "alice"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_bob_logs_in_by_email(client: AsyncClient, test_data):
    await client.post("/auth/register", json=test_data.get_copy("bob"))

    response = await client.post("/auth/login", json=test_data.login("bob", by="email"))

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "bob@x.com"
