"""Atomic read-modify-write unit for a shopper's cart.

Every cart mutation goes through ``CartTransaction.run``:

  1. read the cart (creating it if absent),
  2. apply the mutation in memory,
  3. compare-and-set it back against the version that was read.

If another writer got there first the store raises
ConcurrencyConflictError and the whole cycle re-runs from a fresh read,
with exponential backoff and jitter, up to ``max_attempts``.  Two
concurrent adds for the same shopper therefore both land.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog
from tenacity import RetryError

from storefront.application.conflict_retry import retrying_on_conflict
from storefront.config import RetryConfig
from storefront.domain.exceptions import StoreUnavailableError
from storefront.domain.model.cart import Cart
from storefront.domain.store.cart_store import CartStore

logger = structlog.get_logger(__name__)

R = TypeVar("R")


class CartTransaction:

    def __init__(self, cart_store: CartStore, retry: RetryConfig | None = None) -> None:
        self._cart_store = cart_store
        self._retry = retry or RetryConfig()

    def run(self, user_id: str, mutate: Callable[[Cart], R]) -> tuple[Cart, R]:
        """Apply *mutate* to the shopper's cart atomically.

        Returns the saved cart and whatever *mutate* returned.  Domain
        errors raised by *mutate* propagate on the first attempt; nothing
        is written in that case.

        Raises:
            StoreUnavailableError: conflicts persisted past the retry budget.
        """
        try:
            for attempt in retrying_on_conflict(self._retry, "cart_conflict_retry", user_id=user_id):
                with attempt:
                    cart, _ = self._cart_store.get_or_create(user_id)
                    expected = cart.version
                    result = mutate(cart)
                    self._cart_store.save(cart, expected_version=expected)
                    return cart, result
        except RetryError as exc:
            logger.error(
                "cart_conflict_retries_exhausted",
                user_id=user_id,
                attempts=self._retry.max_attempts,
            )
            raise StoreUnavailableError(
                f"Cart for '{user_id}' kept changing underneath; gave up after "
                f"{self._retry.max_attempts} attempts"
            ) from exc

        raise RuntimeError("Unexpected retry state")  # pragma: no cover
