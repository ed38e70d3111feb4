"""
Transaction boundary for a SQLAlchemy session.

The session already has a transaction open at all times
(autocommit=False). This runner only decides who commits it:
the outermost with_transaction() call. Nested calls run inside
the outer unit, and an exception anywhere rolls back all of it.
"""

import logging

from sqlalchemy.orm import Session

from ledger_core.ports import TransactionRunner

logger = logging.getLogger(__name__)


class SqlAlchemyTransactionRunner(TransactionRunner):

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @property
    def in_transaction(self):
        return self._depth > 0

    def with_transaction(self, fn):
        outermost = self._depth == 0
        self._depth += 1
        try:
            result = fn()
            if outermost:
                self.db.commit()
            return result
        except Exception:
            if outermost:
                logger.debug("Rolling back transaction")
                self.db.rollback()
            raise
        finally:
            self._depth -= 1
