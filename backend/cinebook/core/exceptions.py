"""
Error taxonomy for the booking API.

Every error carries the HTTP status it maps to; the exception handlers
render them all in the same {"status": "error", "message": ...} envelope.
"""


class CinebookError(Exception):
    """Base error with a client-facing message and status code."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(CinebookError):
    """Missing or malformed input (400)."""

    status_code = 400


class AuthError(CinebookError):
    """Credential mismatch (401)."""

    status_code = 401


class NotFoundError(CinebookError):
    """No matching booking (404)."""

    status_code = 404


class SeatUnavailableError(CinebookError):
    """A requested seat is already occupied for the screening (409)."""

    status_code = 409


class DatabaseError(CinebookError):
    """Connectivity, query or transaction fault (500)."""

    status_code = 500
