class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(ValidationError):
    """Raised for an unusable recurrence setup (bad window, bad time range, missing fields)."""


class InvalidTransitionError(DomainError):
    """Raised when a schedule entry cannot move to the requested state."""


class EntryNotFoundError(DomainError):
    """Raised when a schedule entry does not exist."""


class PersistenceConflict(DomainError):
    """Raised by repositories when an occurrence already exists (duplicate key)."""
