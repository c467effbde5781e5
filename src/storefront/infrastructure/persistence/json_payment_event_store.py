"""JSON-file-backed implementation of PaymentEventStore."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from storefront.domain.exceptions import DuplicatePaymentEventError
from storefront.domain.store.payment_event_store import (
    DEFAULT_CLAIM_LEASE,
    PaymentEventRecord,
    PaymentEventStore,
)
from storefront.infrastructure.persistence.json_collection import JsonCollection


class JsonPaymentEventStore(PaymentEventStore):

    def __init__(self, collection: JsonCollection, lease: timedelta = DEFAULT_CLAIM_LEASE) -> None:
        self._collection = collection
        self._lease = lease

    def claim(self, event_id: str, event_type: str) -> PaymentEventRecord:
        now = datetime.now(timezone.utc)
        with self._collection.update() as documents:
            attempts = 1
            if event_id in documents:
                previous = self._to_domain(event_id, documents[event_id])
                if not previous.lease_expired(self._lease, now):
                    raise DuplicatePaymentEventError(
                        f"Payment event '{event_id}' already processed"
                    )
                attempts = previous.attempts + 1
            record = PaymentEventRecord(
                event_id=event_id,
                event_type=event_type,
                received_at=now,
                attempts=attempts,
            )
            documents[event_id] = self._to_raw(record)
            return record

    def complete(self, event_id: str, outcome: str, order_id: str | None = None) -> None:
        with self._collection.update() as documents:
            raw = documents.get(event_id)
            if raw is not None:
                raw["outcome"] = outcome
                raw["orderId"] = order_id

    def release(self, event_id: str) -> None:
        with self._collection.update() as documents:
            documents.pop(event_id, None)

    def get(self, event_id: str) -> PaymentEventRecord | None:
        raw = self._collection.read().get(event_id)
        return self._to_domain(event_id, raw) if raw is not None else None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: PaymentEventRecord) -> dict:
        return {
            "eventType": record.event_type,
            "receivedAt": record.received_at.isoformat(),
            "outcome": record.outcome,
            "orderId": record.order_id,
            "attempts": record.attempts,
        }

    @staticmethod
    def _to_domain(event_id: str, raw: dict) -> PaymentEventRecord:
        return PaymentEventRecord(
            event_id=event_id,
            event_type=raw["eventType"],
            received_at=datetime.fromisoformat(raw["receivedAt"]),
            outcome=raw.get("outcome"),
            order_id=raw.get("orderId"),
            attempts=raw.get("attempts", 1),
        )
