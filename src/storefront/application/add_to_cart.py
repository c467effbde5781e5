"""Application service: Add To Cart use case.

Looks up the authoritative product (price, name, image) at add time and
applies the change inside a CartTransaction so concurrent adds for the
same shopper never overwrite each other.
"""

from __future__ import annotations

import structlog

from storefront.application.cart_transaction import CartTransaction
from storefront.application.dto import CartDTO
from storefront.application.identity import require_identity
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.store.product_store import ProductStore

logger = structlog.get_logger(__name__)


class AddToCartHandler:

    def __init__(self, transaction: CartTransaction, product_store: ProductStore) -> None:
        self._transaction = transaction
        self._product_store = product_store

    def handle(self, user_id: str | None, product_id: str, quantity: int = 1) -> CartDTO:
        user_id = require_identity(user_id)

        product = self._product_store.fetch_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product '{product_id}' not found")

        cart, line = self._transaction.run(
            user_id, lambda c: c.add(product, quantity)
        )
        logger.info(
            "cart_item_added",
            user_id=user_id,
            product_id=product_id,
            quantity=line.quantity,
            unit_price=str(line.unit_price),
        )
        return CartDTO.from_cart(cart)
