"""Application service: Checkout (create order from cart) use case.

Steps:
1. Read the shopper's cart.
2. Snapshot it into an Order (fails with EmptyCartError, nothing written).
3. Persist the order.
4. Clear the cart (best effort, see ``order_saga``).

Prices are not re-checked against the catalog: the checkout price is the
cart total.
"""

from __future__ import annotations

import structlog

from storefront.application.cart_transaction import CartTransaction
from storefront.application.dto import CheckoutResult, OrderDTO
from storefront.application.identity import require_identity
from storefront.application.order_saga import clear_cart_after_order
from storefront.config import DEFAULT_CLEAR_FAILURE_MODE, ClearFailureMode
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Address
from storefront.domain.store.cart_store import CartStore
from storefront.domain.store.order_store import OrderStore

logger = structlog.get_logger(__name__)


class CheckoutHandler:

    def __init__(
        self,
        cart_store: CartStore,
        order_store: OrderStore,
        transaction: CartTransaction,
        clear_failure_mode: ClearFailureMode = DEFAULT_CLEAR_FAILURE_MODE,
    ) -> None:
        self._cart_store = cart_store
        self._order_store = order_store
        self._transaction = transaction
        self._clear_failure_mode = clear_failure_mode

    def handle(
        self,
        user_id: str | None,
        shipping_address: Address,
        billing_address: Address,
        payment_id: str | None = None,
    ) -> CheckoutResult:
        user_id = require_identity(user_id)

        cart = self._cart_store.get(user_id) or Cart(user_id=user_id)
        order = Order.from_cart(
            cart,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_id=payment_id,
        )
        self._order_store.add(order)
        logger.info(
            "order_created",
            user_id=user_id,
            order_id=order.id,
            total=str(order.total),
            payment_status=order.payment_status.value,
        )

        cleared = clear_cart_after_order(
            self._transaction, user_id, order.id, self._clear_failure_mode  # type: ignore[arg-type]
        )
        return CheckoutResult(order=OrderDTO.from_order(order), cart_cleared=cleared)
