"""Application services: order listings (queries)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.identity import require_admin, require_identity
from storefront.domain.exceptions import ValidationError
from storefront.domain.store.order_store import OrderStore


class ListOrdersHandler:
    """The shopper's own orders, newest first."""

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, user_id: str | None) -> list[OrderDTO]:
        user_id = require_identity(user_id)
        return [OrderDTO.from_order(o) for o in self._order_store.list_for_user(user_id)]


class ListRecentOrdersHandler:
    """Admin order table: most recent orders across all shoppers."""

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, is_admin: bool, limit: int = 10) -> list[OrderDTO]:
        require_admin(is_admin)
        if limit < 1:
            raise ValidationError("Limit must be positive")
        return [OrderDTO.from_order(o) for o in self._order_store.list_recent(limit)]
