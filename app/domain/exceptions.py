"""
Domain-level exceptions for the hexagonal architecture.

These exceptions represent business rule violations and backend failures.
They are mapped to appropriate HTTP responses in the API layer.
"""


class DomainException(Exception):
    """Base exception for all domain-level errors."""
    pass


class UnauthorizedError(DomainException):
    """Raised when a caller identity is required but absent."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation rules are violated."""
    pass


class BadRequestError(ValidationError):
    """Raised when a request is malformed or not permitted for the caller."""
    pass


class InsufficientPermissionsError(BadRequestError):
    """Raised when the caller lacks a capability the operation requires."""
    pass


class NotFoundError(DomainException):
    """Base exception for entities not found."""
    pass


class MemberNotFoundError(NotFoundError):
    """Raised when no member matches a handle."""

    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"Member with handle '{handle}' not found")


class DataFormatError(DomainException):
    """Raised when a stored document has a malformed encoding."""

    def __init__(self, field: str, reason: str = None):
        self.field = field
        self.reason = reason

        reason_str = f": {reason}" if reason else ""
        super().__init__(f"Malformed value for '{field}'{reason_str}")


class BackendUnavailableError(DomainException):
    """Raised when an index, store or verification backend call fails."""

    def __init__(self, backend: str, operation: str, cause: Exception = None):
        self.backend = backend
        self.operation = operation
        self.cause = cause

        message = f"{backend} failed during {operation}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


__all__ = [
    "DomainException",
    "UnauthorizedError",
    "ValidationError",
    "BadRequestError",
    "InsufficientPermissionsError",
    "NotFoundError",
    "MemberNotFoundError",
    "DataFormatError",
    "BackendUnavailableError",
]
