"""SQLAlchemy-backed idempotency store."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_core.errors import IdempotencyKeyTaken
from ledger_core.models.idempotency_key import IdempotencyRecord
from ledger_core.ports import Clock, IdempotencyStore, SystemClock


class SqlAlchemyIdempotencyStore(IdempotencyStore):

    def __init__(self, db: Session, clock: Clock | None = None):
        self.db = db
        self.clock = clock or SystemClock()

    def get(self, tenant_id, action_key, idempotency_key):
        return self.db.execute(
            select(IdempotencyRecord.response_body).where(
                IdempotencyRecord.tenant_id == tenant_id,
                IdempotencyRecord.action_key == action_key,
                IdempotencyRecord.idempotency_key == idempotency_key,
            )
        ).scalar_one_or_none()

    def store(self, tenant_id, action_key, idempotency_key, body):
        self.db.add(IdempotencyRecord(
            tenant_id=tenant_id,
            action_key=action_key,
            idempotency_key=idempotency_key,
            response_body=body,
            created_at=self.clock.now(),
        ))
        try:
            self.db.flush()
        except IntegrityError as exc:
            # A concurrent request with the same key committed first
            raise IdempotencyKeyTaken(
                f"idempotency key {idempotency_key} is already in use for {action_key}"
            ) from exc
