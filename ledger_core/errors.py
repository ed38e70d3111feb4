"""
Error taxonomy for the accounting core.

Aggregates and services raise these. The AccountingApplication
facade catches them and hands them back to callers inside a
Result, so nothing in this family crosses the public boundary
as an exception.
"""


class AccountingError(Exception):
    """Base class for every failure the core reports to callers."""

    code = "ACCOUNTING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.message!r}>"


class ValidationError(AccountingError, ValueError):
    """Malformed input or a broken invariant (unbalanced entry, closed period, ...)."""

    code = "VALIDATION"


class NotFoundError(AccountingError, LookupError):
    """Unknown account, entry, period, or a tenant without accounting setup."""

    code = "NOT_FOUND"


class ConflictError(AccountingError):
    """Uniqueness violations such as a duplicate account code."""

    code = "CONFLICT"


class IdempotencyKeyTaken(ConflictError):
    """Another request stored a response under the same idempotency key first."""

    code = "IDEMPOTENCY_KEY_TAKEN"
