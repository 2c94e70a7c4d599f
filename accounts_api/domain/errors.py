"""Typed failures raised by the account core.

Every failure carries an HTTP-style status code and a message that is
surfaced verbatim to the caller.
"""

from fastapi import status


class AccountError(Exception):
    """Base class for terminal, caller-facing account failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(AccountError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(AccountError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AccountError):
    status_code = status.HTTP_409_CONFLICT


class InvalidToken(Exception):
    """Session token is malformed, tampered with or expired."""


class DuplicateEmailError(Exception):
    """The user store rejected a second record with the same email."""

    def __init__(self, email: str) -> None:
        super().__init__(email)
        self.email = email
