"""
core/errors.py -- Application error taxonomy.

Every failure the service reports to a client is one of these classes. Each
carries a human-readable message, a machine-readable code, and the HTTP status
the API layer answers with. api/main.py registers a single exception handler
for AppError that turns any of them into {"message": ..., "code": ...}.

Messages are written for clients. Internal detail (SQL text, driver errors,
token verification reasons) stays in the logs and never goes into a message.

Layer rule: no imports from api/, auth/, or books/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map to a client-facing HTTP response."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or empty required fields."""

    status_code = 400
    code = "validation_error"


class ConflictError(AppError):
    """The resource already exists (duplicate username)."""

    status_code = 400
    code = "conflict"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class AuthError(AppError):
    """Bad credentials at login (400) or a rejected bearer token (401)."""

    status_code = 400
    code = "bad_credentials"


class StoreError(AppError):
    """The database could not be reached or a query failed."""

    status_code = 500
    code = "store_error"
