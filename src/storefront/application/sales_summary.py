"""Application service: Sales Summary for the admin dashboard (query)."""

from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal

from storefront.application.dto import SalesSummaryDTO
from storefront.application.identity import require_admin
from storefront.domain.model.order import OrderStatus, PaymentStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.store.order_store import OrderStore

# Enough for the dashboard; the store has no aggregate queries.
SUMMARY_WINDOW = 1000


class SalesSummaryHandler:

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, is_admin: bool) -> SalesSummaryDTO:
        require_admin(is_admin)
        orders = self._order_store.list_recent(SUMMARY_WINDOW)

        by_status = Counter(o.status.value for o in orders)
        paid = [
            o for o in orders
            if o.payment_status is PaymentStatus.PAID and o.status is not OrderStatus.CANCELLED
        ]
        revenue = Money.sum(o.total for o in paid)
        average = (
            Money((revenue.amount / len(paid)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
            if paid
            else Money.zero()
        )
        return SalesSummaryDTO(
            order_count=len(orders),
            orders_by_status={s.value: by_status.get(s.value, 0) for s in OrderStatus},
            paid_order_count=len(paid),
            paid_revenue=str(revenue),
            average_paid_order=str(average),
        )
