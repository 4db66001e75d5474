"""
Authentication Use Case DTOs (Data Transfer Objects)

Command and Response classes for the auth flows.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from tipsy.domain.entities import User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Registration intent, fields are validated by the use case"""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Public user fields, never the password hash or reset token"""

    id: int
    username: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserInfo":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role.value if hasattr(user.role, "value") else user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """Response for register and login"""

    user: UserInfo
    token: str


class MeResponse(BaseModel):
    """Response for current user lookup"""

    user: UserInfo


class MessageResponse(BaseModel):
    """Plain confirmation message"""

    message: str
