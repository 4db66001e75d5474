"""
Async engine construction.

The engine is built once in create_app and disposed on shutdown; nothing
here holds module-level state.
"""

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Registers the tables on SQLModel.metadata
import tipsy.domain.entities  # noqa: F401


def build_engine(db_uri: str, pool_timeout: int = 5) -> AsyncEngine:
    url = make_url(db_uri)
    kwargs = {"echo": False, "future": True}

    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = 10
        kwargs["pool_timeout"] = pool_timeout
        kwargs["pool_pre_ping"] = True

    return create_async_engine(db_uri, **kwargs)


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def ping(session: AsyncSession) -> None:
    await session.exec(text("SELECT 1"))
