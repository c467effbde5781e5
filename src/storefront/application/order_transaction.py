"""Atomic read-modify-write of an existing order's status fields.

Admin status changes and payment confirmations both update the same
order document.  Each update re-reads the order, applies its change and
compare-and-sets it against the version it read, so neither writer can
overwrite the other's field from a stale copy.  A lost race re-runs from
a fresh read; domain errors (an illegal transition) are not retried.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog
from tenacity import RetryError

from storefront.application.conflict_retry import retrying_on_conflict
from storefront.config import RetryConfig
from storefront.domain.exceptions import OrderNotFoundError, StoreUnavailableError
from storefront.domain.model.order import Order
from storefront.domain.store.order_store import OrderStore

logger = structlog.get_logger(__name__)

R = TypeVar("R")


class OrderTransaction:

    def __init__(self, order_store: OrderStore, retry: RetryConfig | None = None) -> None:
        self._order_store = order_store
        self._retry = retry or RetryConfig()

    def run(self, order_id: str, mutate: Callable[[Order], R]) -> tuple[Order, R]:
        """Apply *mutate* to a fresh copy of the order and save it.

        Raises:
            OrderNotFoundError: no order with *order_id*.
            StoreUnavailableError: conflicts persisted past the retry budget.
        """
        try:
            for attempt in retrying_on_conflict(self._retry, "order_conflict_retry", order_id=order_id):
                with attempt:
                    order = self._order_store.get_by_id(order_id)
                    if order is None:
                        raise OrderNotFoundError(f"Order '{order_id}' not found")
                    expected = order.version
                    result = mutate(order)
                    self._order_store.save(order, expected_version=expected)
                    return order, result
        except RetryError as exc:
            logger.error(
                "order_conflict_retries_exhausted",
                order_id=order_id,
                attempts=self._retry.max_attempts,
            )
            raise StoreUnavailableError(
                f"Order '{order_id}' kept changing underneath; gave up after "
                f"{self._retry.max_attempts} attempts"
            ) from exc

        raise RuntimeError("Unexpected retry state")  # pragma: no cover
