"""
Input rules shared by the account flows.
"""

import re
from typing import Optional

from tipsy.libs.result import Error, Result, Return

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def validation_error(message: str) -> Result:
    return Return.err(Error("VALIDATION_ERROR", message))


def validate_username(username: str) -> Result[None]:
    if len(username) < MIN_USERNAME_LENGTH:
        return validation_error(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters long"
        )
    return Return.ok(None)


def validate_email(email: str) -> Result[None]:
    if not EMAIL_PATTERN.match(email):
        return validation_error("Invalid email format")
    return Return.ok(None)


def validate_password(password: str, field: str = "Password") -> Result[None]:
    if len(password) < MIN_PASSWORD_LENGTH:
        return validation_error(
            f"{field} must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return validation_error(f"{field} must be at most {MAX_PASSWORD_BYTES} bytes long")
    return Return.ok(None)


def require(*values: Optional[str]) -> bool:
    """True when every value is a non-empty string"""
    return all(isinstance(v, str) and v != "" for v in values)
