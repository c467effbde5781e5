"""Application service: Remove From Cart use case.

Removing a product that is not in the cart is a no-op, not an error.
"""

from __future__ import annotations

from storefront.application.cart_transaction import CartTransaction
from storefront.application.dto import CartDTO
from storefront.application.identity import require_identity


class RemoveFromCartHandler:

    def __init__(self, transaction: CartTransaction) -> None:
        self._transaction = transaction

    def handle(self, user_id: str | None, product_id: str) -> CartDTO:
        user_id = require_identity(user_id)
        cart, _ = self._transaction.run(user_id, lambda c: c.remove(product_id))
        return CartDTO.from_cart(cart)
