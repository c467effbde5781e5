"""Application service: Get Cart use case (query).

The cart is created lazily on first read; creation is an explicit
``get_or_create`` on the store so it can be observed separately from a
plain retrieval.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import CartDTO
from storefront.application.identity import require_identity
from storefront.domain.store.cart_store import CartStore

logger = structlog.get_logger(__name__)


class GetCartHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, user_id: str | None) -> CartDTO:
        user_id = require_identity(user_id)
        cart, created = self._cart_store.get_or_create(user_id)
        if created:
            logger.info("cart_created", user_id=user_id)
        return CartDTO.from_cart(cart)
