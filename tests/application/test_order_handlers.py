"""Tests for order queries, status updates and the sales summary."""

from datetime import datetime, timedelta, timezone

import pytest
from structlog.testing import capture_logs

from storefront.application.list_orders import ListOrdersHandler, ListRecentOrdersHandler
from storefront.application.order_transaction import OrderTransaction
from storefront.application.sales_summary import SalesSummaryHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import (
    InvalidTransitionError,
    NotAuthenticatedError,
    NotAuthorizedError,
    OrderNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order, OrderStatus, PaymentStatus
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Address, Money
from tests.fakes import FakeOrderStore

_BASE = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _place(store: FakeOrderStore, user_id: str, price: str, minutes: int = 0,
           payment_status: PaymentStatus | None = None) -> Order:
    cart = Cart(user_id=user_id)
    cart.add(Product(id="p", name="P", price=Money.of(price)), 1)
    order = Order.from_cart(cart, Address(), Address(), payment_status=payment_status)
    order.created_at = _BASE + timedelta(minutes=minutes)
    store.add(order)
    return order


class TestShowOrder:

    def test_owner_can_read(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        dto = ShowOrderHandler(store).handle(order.id, "u1")
        assert dto.total == "$10.00"
        assert dto.status == "pending"

    def test_other_shopper_gets_not_found(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        with pytest.raises(OrderNotFoundError):
            ShowOrderHandler(store).handle(order.id, "u2")

    def test_admin_can_read_any(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        assert ShowOrderHandler(store).handle(order.id, None, is_admin=True).user_id == "u1"

    def test_missing_identity(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        with pytest.raises(NotAuthenticatedError):
            ShowOrderHandler(store).handle(order.id, None)


class TestListOrders:

    def test_own_orders_newest_first(self):
        store = FakeOrderStore()
        first = _place(store, "u1", "1.00", minutes=0)
        _place(store, "u2", "2.00", minutes=1)
        second = _place(store, "u1", "3.00", minutes=2)
        dtos = ListOrdersHandler(store).handle("u1")
        assert [d.id for d in dtos] == [second.id, first.id]

    def test_requires_identity(self):
        with pytest.raises(NotAuthenticatedError):
            ListOrdersHandler(FakeOrderStore()).handle("")

    def test_recent_is_admin_only(self):
        with pytest.raises(NotAuthorizedError):
            ListRecentOrdersHandler(FakeOrderStore()).handle(False)

    def test_recent_limits_across_shoppers(self):
        store = FakeOrderStore()
        for i in range(5):
            _place(store, f"u{i}", "1.00", minutes=i)
        dtos = ListRecentOrdersHandler(store).handle(True, limit=3)
        assert [d.user_id for d in dtos] == ["u4", "u3", "u2"]

    def test_recent_rejects_bad_limit(self):
        with pytest.raises(ValidationError):
            ListRecentOrdersHandler(FakeOrderStore()).handle(True, limit=0)


class TestUpdateOrderStatus:

    def test_moves_forward_and_logs(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        with capture_logs() as logs:
            dto = UpdateOrderStatusHandler(store).handle(order.id, "processing", is_admin=True)
        assert dto.status == "processing"
        assert store.get_by_id(order.id).status is OrderStatus.PROCESSING
        assert logs[0]["event"] == "order_status_changed"
        assert logs[0]["from_status"] == "pending"

    def test_cancelled_to_delivered_rejected(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        handler = UpdateOrderStatusHandler(store)
        handler.handle(order.id, OrderStatus.CANCELLED, is_admin=True)
        with pytest.raises(InvalidTransitionError):
            handler.handle(order.id, OrderStatus.DELIVERED, is_admin=True)
        assert store.get_by_id(order.id).status is OrderStatus.CANCELLED

    def test_admin_only(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        with pytest.raises(NotAuthorizedError):
            UpdateOrderStatusHandler(store).handle(order.id, "processing", is_admin=False)
        assert store.get_by_id(order.id).status is OrderStatus.PENDING

    def test_unknown_status(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        with pytest.raises(ValidationError, match="Unknown order status"):
            UpdateOrderStatusHandler(store).handle(order.id, "teleported", is_admin=True)

    def test_unknown_order(self):
        with pytest.raises(OrderNotFoundError):
            UpdateOrderStatusHandler(FakeOrderStore()).handle("nope", "processing", is_admin=True)

    def test_items_and_total_unchanged(self):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        UpdateOrderStatusHandler(store).handle(order.id, "processing", is_admin=True)
        saved = store.get_by_id(order.id)
        assert saved.total == Money.of("10.00")
        assert saved.items == order.items

    def test_concurrent_payment_confirmation_survives(self, fast_retry):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        store.before_next_save = lambda: OrderTransaction(store, fast_retry).run(
            order.id, lambda o: o.record_payment(PaymentStatus.PAID)
        )

        with capture_logs() as logs:
            UpdateOrderStatusHandler(store, retry=fast_retry).handle(
                order.id, "processing", is_admin=True
            )

        saved = store.get_by_id(order.id)
        assert saved.status is OrderStatus.PROCESSING
        assert saved.payment_status is PaymentStatus.PAID
        assert [e["event"] for e in logs].count("order_conflict_retry") == 1

    def test_stale_copy_cannot_revive_cancelled_order(self, fast_retry):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        handler = UpdateOrderStatusHandler(store, retry=fast_retry)
        store.before_next_save = lambda: handler.handle(order.id, "cancelled", is_admin=True)

        with pytest.raises(InvalidTransitionError):
            handler.handle(order.id, "processing", is_admin=True)
        assert store.get_by_id(order.id).status is OrderStatus.CANCELLED

    def test_persistent_conflicts_give_up(self, fast_retry):
        store = FakeOrderStore()
        order = _place(store, "u1", "10.00")
        store.inject_conflicts = 100
        with pytest.raises(StoreUnavailableError, match="20 attempts"):
            UpdateOrderStatusHandler(store, retry=fast_retry).handle(
                order.id, "processing", is_admin=True
            )
        assert store.get_by_id(order.id).status is OrderStatus.PENDING


class TestSalesSummary:

    def test_admin_only(self):
        with pytest.raises(NotAuthorizedError):
            SalesSummaryHandler(FakeOrderStore()).handle(False)

    def test_counts_paid_revenue_excluding_cancelled(self):
        store = FakeOrderStore()
        _place(store, "u1", "10.00", payment_status=PaymentStatus.PAID)
        _place(store, "u2", "20.00", payment_status=PaymentStatus.PAID)
        _place(store, "u3", "5.00")
        cancelled = _place(store, "u4", "99.00", payment_status=PaymentStatus.PAID)
        UpdateOrderStatusHandler(store).handle(cancelled.id, "cancelled", is_admin=True)

        summary = SalesSummaryHandler(store).handle(True)

        assert summary.order_count == 4
        assert summary.orders_by_status["pending"] == 3
        assert summary.orders_by_status["cancelled"] == 1
        assert summary.orders_by_status["shipped"] == 0
        assert summary.paid_order_count == 2
        assert summary.paid_revenue == "$30.00"
        assert summary.average_paid_order == "$15.00"

    def test_empty(self):
        summary = SalesSummaryHandler(FakeOrderStore()).handle(True)
        assert summary.order_count == 0
        assert summary.paid_revenue == "$0.00"
        assert summary.average_paid_order == "$0.00"
