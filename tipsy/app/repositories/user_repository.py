from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from tipsy.domain.entities import User, UserRole


class DuplicateUserError(Exception):
    """Raised when an insert violates the username/email unique indexes"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_login(self, login: str) -> Optional[User]:
        """
        Get user whose username or email matches, case-insensitively.

        A username match is preferred over an email match.
        """
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address, case-insensitively"""
        pass

    @abstractmethod
    async def exists_by_username_or_email(self, username: str, email: str) -> bool:
        """Check whether either identifier is taken, case-insensitively"""
        pass

    @abstractmethod
    async def get_by_reset_token(self, token_hash: str, now: datetime) -> Optional[User]:
        """Get user holding this reset token digest with an expiry after now"""
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        """List users, newest first"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user, raising DuplicateUserError on unique violations"""
        pass

    @abstractmethod
    async def update_password_hash(self, user: User, password_hash: str) -> User:
        """Set a new password hash and clear any pending reset token"""
        pass

    @abstractmethod
    async def redeem_reset_token(
        self, user: User, token_hash: str, now: datetime, password_hash: str
    ) -> Optional[User]:
        """
        Set a new password hash if user still holds token_hash unexpired.

        The check and the write are one UPDATE, so of two concurrent
        redemptions of the same token only one changes a row. Returns None
        when nothing was updated.
        """
        pass

    @abstractmethod
    async def update_reset_token(
        self, user: User, token_hash: Optional[str], expires_at: Optional[datetime]
    ) -> User:
        """Store (or clear) the reset token digest and expiry"""
        pass

    @abstractmethod
    async def update_role(self, user: User, role: UserRole) -> User:
        """Change user role"""
        pass

    @abstractmethod
    async def delete(self, user: User) -> None:
        """Delete user"""
        pass
