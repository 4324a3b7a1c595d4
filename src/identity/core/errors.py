"""Error hierarchy for the identity core.

Error layers:
- IdentityError: Base class for all identity errors
- DomainError: Recoverable failures caused by caller input (reject the request)
- InternalError: Programming defects or corrupt stored data (log loudly, never retry)
"""


class IdentityError(Exception):
    """Base class for all identity errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (caller input - recoverable)
# =============================================================================


class DomainError(IdentityError):
    """Base class for domain errors."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class NotFoundError(DomainError):
    """Provider link not found."""


class ConflictError(DomainError):
    """Provider link already exists or the operation would orphan the credential."""


# =============================================================================
# Internal Errors (defects - non-recoverable)
# =============================================================================


class InternalError(IdentityError):
    """Base class for internal errors."""


class InvariantViolationError(InternalError):
    """A value that is well-formed by construction could not be processed."""


class CorruptCredentialError(InternalError):
    """A stored credential payload could not be decoded."""
