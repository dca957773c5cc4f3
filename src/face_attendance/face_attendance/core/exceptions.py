class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StorageFailure(DomainError):
    """Raised when the durable store is unavailable or a write could not be committed."""
