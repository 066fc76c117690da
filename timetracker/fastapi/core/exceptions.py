"""
Domain exceptions for the time tracking service.

Services and CRUD classes raise these instead of HTTP errors; the
exception handlers registered in ``core.middleware`` map each kind to a
transport status code.
"""


class TimeTrackerError(Exception):
    """Base exception for business rule violations."""

    code = "internal_error"

    def __init__(self, message: str = "Unexpected error"):
        super().__init__(message)
        self.message = message


class ValidationError(TimeTrackerError):
    """Raised when input data is malformed or violates domain rules."""

    code = "validation_error"


class ConflictError(TimeTrackerError):
    """Raised when an operation clashes with existing state."""

    code = "conflict"


class DuplicateIdError(ConflictError):
    """Raised when a record is created with an id that already exists."""

    code = "duplicate_id"


class NotFoundError(TimeTrackerError):
    """Raised when a record or user is absent or not owned by the caller."""

    code = "not_found"


class ForbiddenError(TimeTrackerError):
    """Raised when the caller's role or ownership does not allow an action."""

    code = "forbidden"


class UnauthenticatedError(TimeTrackerError):
    """Raised when the token or login credentials are missing or invalid."""

    code = "unauthenticated"


class StoreUnavailable(TimeTrackerError):
    """Raised on transient persistence failures. Callers may retry."""

    code = "store_unavailable"
