"""Abstract store for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderStore(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order, assign its id and set ``version`` to 1."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def save(self, order: Order, expected_version: int) -> None:
        """Compare-and-set the status / payment fields of an existing order.

        Raises ConcurrencyConflictError if the stored version is not
        *expected_version*, OrderNotFoundError if the order is gone.  Bumps
        ``order.version`` on success.
        """

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """Return a shopper's orders, newest first."""

    @abstractmethod
    def list_recent(self, limit: int = 10) -> list[Order]:
        """Return the most recent orders across all shoppers, newest first."""

    @abstractmethod
    def find_by_payment_id(self, payment_id: str) -> Order | None:
        """Return the order linked to a provider payment id, or None."""
