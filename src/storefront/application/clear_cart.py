"""Application service: Clear Cart use case."""

from __future__ import annotations

from storefront.application.cart_transaction import CartTransaction
from storefront.application.dto import CartDTO
from storefront.application.identity import require_identity


class ClearCartHandler:

    def __init__(self, transaction: CartTransaction) -> None:
        self._transaction = transaction

    def handle(self, user_id: str | None) -> CartDTO:
        user_id = require_identity(user_id)
        cart, _ = self._transaction.run(user_id, lambda c: c.clear())
        return CartDTO.from_cart(cart)
