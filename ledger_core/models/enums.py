"""
Shared enumerations for the domain and the database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid account_type
or direction is caught at the database level, not just
in Python validation.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class EntryDirection(str, enum.Enum):
    """Side of a journal line."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    def flipped(self) -> "EntryDirection":
        if self is EntryDirection.DEBIT:
            return EntryDirection.CREDIT
        return EntryDirection.DEBIT


class EntryStatus(str, enum.Enum):
    """
    Journal entry lifecycle.

    A reversed entry stays POSTED; reversal is tracked by the
    reversed_by_entry_id link, not by a separate status.
    """
    DRAFT = "DRAFT"
    POSTED = "POSTED"


class PeriodStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
