"""Error taxonomy shared by the API and the Streamlit client.

Each error carries the HTTP status it maps to, so the backend can render it
with a single exception handler and the client can rebuild it from a
response status code.
"""
from __future__ import annotations


class CheckInError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(CheckInError):
    status_code = 401
    default_message = "Not authenticated"


class NotFoundError(CheckInError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CheckInError):
    status_code = 409
    default_message = "You have already submitted a check-in for this period today."


class StorageError(CheckInError):
    status_code = 500
    default_message = "Failed to reach storage"


_BY_STATUS = {
    AuthError.status_code: AuthError,
    NotFoundError.status_code: NotFoundError,
    ConflictError.status_code: ConflictError,
}


def error_for_status(status_code: int, message: str | None = None) -> CheckInError:
    error_cls = _BY_STATUS.get(status_code, StorageError)
    return error_cls(message)
