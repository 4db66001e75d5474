"""
Tipsy Domain Enums
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role"""

    user = "user"
    admin = "admin"
