"""
Result wrapper returned by every facade operation.

Usage:
    result = app.create_ledger_account(ctx, request)
    if result.success:
        account = result.value
    else:
        error = result.error      # ValidationError / NotFoundError / ConflictError
"""

from typing import Generic, TypeVar

from ledger_core.errors import AccountingError

T = TypeVar("T")


class Result(Generic[T]):

    def __init__(
        self,
        success: bool,
        value: T | None = None,
        error: AccountingError | None = None,
    ):
        self.success = success
        self.value = value
        self.error = error

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: AccountingError) -> "Result[T]":
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if not self.success:
            raise self.error
        return self.value

    def __repr__(self) -> str:
        if self.success:
            return f"<Result ok {self.value!r}>"
        return f"<Result fail {self.error!r}>"
