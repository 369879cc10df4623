class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a student name is unknown."""


class DuplicateNameError(DomainError):
    """Raised when creating a student whose name is already taken."""


class InactiveError(DomainError):
    """Raised when an operation requires an active student."""


class IdempotencyNotice(DomainError):
    """Non-fatal: the command was already applied (or never was).

    State is left untouched; callers report it and do not retry.
    """


class AlreadyMarkedError(IdempotencyNotice):
    """Raised when the student is already marked present on that date."""


class NotMarkedError(IdempotencyNotice):
    """Raised when there is no mark to remove for that date."""


class InvalidAmountError(DomainError):
    """Raised when an administrative balance adjustment is not acceptable."""


class OverpaymentError(InvalidAmountError):
    """Raised when a debt payment exceeds the current debt."""
