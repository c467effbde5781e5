"""Application service: Update Order Status use case (admin).

The Order aggregate enforces the lifecycle; an illegal move raises
InvalidTransitionError and nothing is saved.  The transition is applied
to a freshly read copy inside an OrderTransaction, so a concurrent
payment confirmation cannot roll the status back.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.identity import require_admin
from storefront.application.order_transaction import OrderTransaction
from storefront.config import RetryConfig
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.store.order_store import OrderStore

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_store: OrderStore, retry: RetryConfig | None = None) -> None:
        self._transaction = OrderTransaction(order_store, retry)

    def handle(self, order_id: str, new_status: OrderStatus | str, is_admin: bool) -> OrderDTO:
        require_admin(is_admin)
        if isinstance(new_status, str):
            try:
                new_status = OrderStatus(new_status.lower())
            except ValueError as exc:
                raise ValidationError(f"Unknown order status: '{new_status}'") from exc

        def transition(order: Order) -> OrderStatus:
            previous = order.status
            order.transition_to(new_status)  # type: ignore[arg-type]
            return previous

        order, previous = self._transaction.run(order_id, transition)
        logger.info(
            "order_status_changed",
            order_id=order_id,
            from_status=previous.value,
            to_status=order.status.value,
        )
        return OrderDTO.from_order(order)
