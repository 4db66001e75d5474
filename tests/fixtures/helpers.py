from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tipsy.domain.entities import User, UserRole


async def register(client: AsyncClient, payload: dict) -> dict:
    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def make_admin(client: AsyncClient, db_session: AsyncSession, payload: dict) -> str:
    """Register, promote in the database, then log in again for an admin token"""
    await register(client, payload)

    result = await db_session.exec(select(User).where(User.username == payload["username"]))
    user = result.one()
    user.role = UserRole.admin
    db_session.add(user)
    await db_session.commit()

    response = await client.post(
        "/auth/login", json={"login": payload["username"], "password": payload["password"]}
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def public_fields(user: dict) -> dict:
    """User JSON without the server-generated id and timestamps"""
    return {k: v for k, v in user.items() if k not in {"id", "created_at", "updated_at"}}
