"""Failures raised by purchasing's ledger postings."""

from ledger_core.errors import AccountingError


class PurchasingPostingError(Exception):
    """
    The ledger refused a purchasing posting.

    Raised, not returned: it must abort the purchasing operation
    that triggered the posting. The ledger's own failure is kept
    on .cause so callers can show its exact message.
    """

    def __init__(self, message: str, cause: AccountingError):
        super().__init__(f"{message}: {cause.message}")
        self.cause = cause
