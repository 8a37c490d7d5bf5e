class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a required field is missing."""


class DuplicateError(DomainError):
    """Raised when a catalog key already exists."""


class StorageError(DomainError):
    """Raised when the backing store fails an existence check or a write."""


class FormatError(DomainError):
    """Raised when an import file has an unsupported extension."""
