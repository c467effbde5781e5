"""Application service: Show Order use case (query).

Shoppers can read their own orders; admins can read any.  An order that
belongs to someone else is reported as not found.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.identity import require_identity
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.store.order_store import OrderStore


class ShowOrderHandler:

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, order_id: str, user_id: str | None, is_admin: bool = False) -> OrderDTO:
        if not is_admin:
            user_id = require_identity(user_id)
        order = self._order_store.get_by_id(order_id)
        if order is None or (not is_admin and order.user_id != user_id):
            raise OrderNotFoundError(f"Order '{order_id}' not found")
        return OrderDTO.from_order(order)
