from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tipsy.app.repositories.user_repository import DuplicateUserError, IUserRepository
from tipsy.domain.base import utcnow
from tipsy.domain.entities import User, UserRole


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_login(self, login: str) -> Optional[User]:
        lowered = login.lower()
        username_match = func.lower(User.username) == lowered
        stmt = (
            select(User)
            .where(or_(username_match, func.lower(User.email) == lowered))
            # One user's username can equal another user's email; the username wins
            .order_by(case((username_match, 0), else_=1))
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def exists_by_username_or_email(self, username: str, email: str) -> bool:
        stmt = select(User.id).where(
            or_(
                func.lower(User.username) == username.lower(),
                func.lower(User.email) == email.lower(),
            )
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def get_by_reset_token(self, token_hash: str, now: datetime) -> Optional[User]:
        stmt = select(User).where(
            User.reset_token == token_hash, User.reset_token_expiry > now
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_all(self) -> List[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateUserError(str(e.orig)) from e
        await self.session.refresh(user)
        return user

    async def update_password_hash(self, user: User, password_hash: str) -> User:
        # Password and reset fields change in one UPDATE
        user.password_hash = password_hash
        user.reset_token = None
        user.reset_token_expiry = None
        return await self._save(user)

    async def redeem_reset_token(
        self, user: User, token_hash: str, now: datetime, password_hash: str
    ) -> Optional[User]:
        stmt = (
            update(User)
            .where(
                User.id == user.id,
                User.reset_token == token_hash,
                User.reset_token_expiry > now,
            )
            .values(
                password_hash=password_hash,
                reset_token=None,
                reset_token_expiry=None,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        await self.session.refresh(user)
        return user

    async def update_reset_token(
        self, user: User, token_hash: Optional[str], expires_at: Optional[datetime]
    ) -> User:
        user.reset_token = token_hash
        user.reset_token_expiry = expires_at
        return await self._save(user)

    async def update_role(self, user: User, role: UserRole) -> User:
        user.role = role
        return await self._save(user)

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()

    async def _save(self, user: User) -> User:
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
