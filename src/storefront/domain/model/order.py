"""Order aggregate.

An Order is materialised once from a Cart snapshot.  Its line items and
total are frozen at creation; only ``status`` and ``payment_status`` move
afterwards, and only along the transitions listed below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import EmptyCartError, InvalidTransitionError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Address, Money


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(Enum):
    PENDING = "pending"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    PAID = "paid"
    FAILED = "failed"


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset(
        {PaymentStatus.AWAITING_CONFIRMATION, PaymentStatus.PAID, PaymentStatus.FAILED}
    ),
    PaymentStatus.AWAITING_CONFIRMATION: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset(),
}


@dataclass(frozen=True)
class OrderLineItem:
    """Copy of a cart line at checkout time; no live link to the product."""

    product_id: str
    quantity: int
    unit_price: Money
    name: str = ""
    image: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for orders.

    Use ``Order.from_cart()`` for new orders.  The ``__init__`` stays simple
    so the store can reconstitute persisted orders without re-validating.

    ``version`` is the compare-and-set token for status and payment
    updates; 0 means the order has never been stored.
    """

    id: str | None
    user_id: str
    items: tuple[OrderLineItem, ...]
    total: Money
    shipping_address: Address = field(default_factory=Address)
    billing_address: Address = field(default_factory=Address)
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: str | None = None
    payment_event_id: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def from_cart(
        cart: Cart,
        shipping_address: Address,
        billing_address: Address,
        payment_id: str | None = None,
        payment_status: PaymentStatus | None = None,
        payment_event_id: str | None = None,
    ) -> Order:
        """Snapshot *cart* into a new order.

        Items and total are copied verbatim; prices are not re-checked
        against the catalog.
        """
        if cart.is_empty:
            raise EmptyCartError("Cannot create an order from an empty cart")

        if payment_status is None:
            payment_status = (
                PaymentStatus.AWAITING_CONFIRMATION if payment_id else PaymentStatus.PENDING
            )

        return Order(
            id=None,
            user_id=cart.user_id,
            items=tuple(
                OrderLineItem(
                    product_id=i.product_id,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                    name=i.name,
                    image=i.image,
                )
                for i in cart.items
            ),
            total=cart.total,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_status=payment_status,
            payment_id=payment_id,
            payment_event_id=payment_event_id,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move the order forward through its lifecycle.

        PENDING -> PROCESSING -> SHIPPED -> DELIVERED, with CANCELLED
        reachable from PENDING or PROCESSING only.
        """
        if new_status not in ORDER_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Cannot move order from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
        self.updated_at = _now()

    def record_payment(
        self,
        payment_status: PaymentStatus,
        payment_id: str | None = None,
    ) -> None:
        if payment_status not in PAYMENT_TRANSITIONS[self.payment_status]:
            raise InvalidTransitionError(
                f"Cannot move payment from {self.payment_status.value} "
                f"to {payment_status.value}"
            )
        self.payment_status = payment_status
        if payment_id:
            self.payment_id = payment_id
        self.updated_at = _now()

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)
