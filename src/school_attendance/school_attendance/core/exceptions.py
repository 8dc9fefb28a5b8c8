class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced group, plan or person does not exist."""


class SaveError(DomainError):
    """Raised when the record store rejects or fails a save/delete call.

    The caller keeps its editing state so the user can retry.
    """
