from typing import Dict, NoReturn

from fastapi import status

from tipsy.libs.result import Error

# Error codes that are the caller's fault; anything else is a 500
CLIENT_ERROR_STATUS: Dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_OR_EXPIRED_TOKEN": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "AUTHENTICATION_REQUIRED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_TOKEN": status.HTTP_403_FORBIDDEN,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    """An Error the caller can fix, rendered with its HTTP status"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    @classmethod
    def from_error(cls, base_error: Error) -> "ClientError":
        return cls(base_error, status_code=CLIENT_ERROR_STATUS[base_error.code])


class ServerError(Exception):
    """An Error that is logged in full and answered with a generic 500"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error) -> NoReturn:
    """Raise the HTTP exception matching a use case's error code"""
    if error.code in CLIENT_ERROR_STATUS:
        raise ClientError.from_error(error)
    raise ServerError(error)
