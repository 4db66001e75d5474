"""
Tipsy Domain Entities
"""

from .enums import UserRole
from .user import User

__all__ = [
    "UserRole",
    "User",
]
