class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised by the HTTP layer when a referenced entity does not exist."""


class IntegrityError(DomainError):
    """Raised by the HTTP layer when a delete would orphan dependent records."""


class PersistenceError(DomainError):
    """Raised in strict storage mode when reading or writing state fails."""
