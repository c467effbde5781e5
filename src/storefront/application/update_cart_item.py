"""Application service: Update Cart Item quantity use case.

Sets the quantity exactly (not additive).  A quantity of zero or less
removes the line, exactly like RemoveFromCart.
"""

from __future__ import annotations

from storefront.application.cart_transaction import CartTransaction
from storefront.application.dto import CartDTO
from storefront.application.identity import require_identity


class UpdateCartItemHandler:

    def __init__(self, transaction: CartTransaction) -> None:
        self._transaction = transaction

    def handle(self, user_id: str | None, product_id: str, quantity: int) -> CartDTO:
        user_id = require_identity(user_id)
        cart, _ = self._transaction.run(
            user_id, lambda c: c.set_quantity(product_id, quantity)
        )
        return CartDTO.from_cart(cart)
