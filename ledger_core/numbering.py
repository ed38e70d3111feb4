"""
Sequential document numbering with a collision probe.

The counter on the settings record is the primary source of
numbers. The probe catches the case where the counter is behind
the data (a concurrent writer, a restored backup, a manual
import): a candidate that is already taken is skipped and the
next one is tried.
"""

import logging
from collections.abc import Callable

from ledger_core.errors import ConflictError

logger = logging.getLogger(__name__)


def allocate_unique_number(
    next_number: Callable[[], str],
    is_taken: Callable[[str], bool],
    max_attempts: int = 5,
) -> str:
    """
    Return the first candidate from next_number() that is not taken.

    Raises ConflictError if max_attempts candidates in a row
    are all taken.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = next_number()
        if not is_taken(candidate):
            return candidate
        logger.warning(
            "Number %s already taken, retrying (attempt %d/%d)",
            candidate, attempt, max_attempts,
        )
    raise ConflictError(
        f"could not allocate a free number after {max_attempts} attempts"
    )
