"""Abstract store for the Cart aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (JSON file, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart


class CartStore(ABC):

    @abstractmethod
    def get(self, user_id: str) -> Cart | None:
        """Return the stored cart for a shopper, or None."""

    @abstractmethod
    def get_or_create(self, user_id: str) -> tuple[Cart, bool]:
        """Return the shopper's cart, persisting an empty one if absent.

        The boolean is True when this call created the cart.  Creation is
        an atomic insert-if-absent: two racing callers get the same cart.
        """

    @abstractmethod
    def save(self, cart: Cart, expected_version: int) -> None:
        """Compare-and-set write.

        Raises ConcurrencyConflictError if the stored version is no longer
        ``expected_version``.  On success ``cart.version`` is bumped.
        """
