"""
User Entity

Represents a bar customer or an administrator.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tipsy.domain.base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - an account that can log in and place orders.

    Business Rules:
    - Username and email are unique, compared case-insensitively
    - Password stored as bcrypt hash (cost factor 10)
    - At most one pending password reset token, stored as SHA-256 hex digest
    - Role changes only reach JWTs issued after the change
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=50)
    email: str = Field(max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: UserRole = Field(default=UserRole.user)

    # Password reset (forgot-password flow)
    reset_token: Optional[str] = Field(default=None, index=True, max_length=64)
    reset_token_expiry: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_users_username_lower", text("lower(username)"), unique=True),
        Index("uq_users_email_lower", text("lower(email)"), unique=True),
    )
