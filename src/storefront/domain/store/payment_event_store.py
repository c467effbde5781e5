"""Abstract store of processed payment events.

Provides the idempotency key for the payment event reducer: an event id
can be claimed exactly once.  A claim that never recorded an outcome (the
process died mid-event) blocks redelivery only until its lease runs out;
after that the next delivery takes it over.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

DEFAULT_CLAIM_LEASE = timedelta(minutes=5)


@dataclass
class PaymentEventRecord:
    event_id: str
    event_type: str
    received_at: datetime
    outcome: str | None = None
    order_id: str | None = None
    attempts: int = 1

    @property
    def is_finished(self) -> bool:
        return self.outcome is not None

    def lease_expired(self, lease: timedelta, now: datetime) -> bool:
        return not self.is_finished and now - self.received_at >= lease


class PaymentEventStore(ABC):

    @abstractmethod
    def claim(self, event_id: str, event_type: str) -> PaymentEventRecord:
        """Atomically mark an event as being processed.

        An unfinished claim older than the store's lease is taken over and
        its ``attempts`` incremented.

        Raises DuplicatePaymentEventError if the event id is finished or
        still held by a live claim.
        """

    @abstractmethod
    def complete(self, event_id: str, outcome: str, order_id: str | None = None) -> None:
        """Record the outcome of a claimed event."""

    @abstractmethod
    def release(self, event_id: str) -> None:
        """Drop a claim whose processing failed so redelivery can retry."""

    @abstractmethod
    def get(self, event_id: str) -> PaymentEventRecord | None:
        """Return the record for an event id, or None."""
