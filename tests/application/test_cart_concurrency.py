"""Concurrent cart mutations: no lost updates, bounded retries."""

import threading

import pytest
from structlog.testing import capture_logs

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.cart_transaction import CartTransaction
from storefront.config import RetryConfig
from storefront.domain.exceptions import ItemNotFoundError, StoreUnavailableError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeCartStore, FakeProductStore


def _products() -> FakeProductStore:
    return FakeProductStore([
        Product(id=f"p{i}", name=f"Product {i}", price=Money.of("2.50"), inventory=100)
        for i in range(8)
    ])


class TestConcurrentAdds:

    def test_parallel_adds_of_different_products_all_land(self, fast_retry):
        carts = FakeCartStore()
        handler = AddToCartHandler(CartTransaction(carts, retry=fast_retry), _products())
        errors: list[Exception] = []

        def add(product_id: str) -> None:
            try:
                handler.handle("u1", product_id, 1)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=add, args=(f"p{i}",)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        cart = carts.get("u1")
        assert errors == []
        assert {i.product_id for i in cart.items} == {f"p{i}" for i in range(8)}
        assert cart.total == Money.of("20.00")

    def test_parallel_adds_of_same_product_accumulate(self, fast_retry):
        carts = FakeCartStore()
        handler = AddToCartHandler(CartTransaction(carts, retry=fast_retry), _products())

        threads = [
            threading.Thread(target=handler.handle, args=("u1", "p0", 1)) for _ in range(6)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        cart = carts.get("u1")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 6
        assert cart.total == Money.of("15.00")


class TestCartTransactionRetry:

    def test_conflict_is_retried_from_fresh_read(self, fast_retry):
        carts = FakeCartStore()
        carts.inject_conflicts = 2
        tx = CartTransaction(carts, retry=fast_retry)
        calls = []

        def mutate(cart):
            calls.append(cart.version)
            cart.add(Product(id="x", name="X", price=Money.of("1")), 1)

        with capture_logs() as logs:
            cart, _ = tx.run("u1", mutate)

        assert len(calls) == 3
        assert cart.item_count == 1
        assert carts.get("u1").item_count == 1
        assert [e["event"] for e in logs].count("cart_conflict_retry") == 2

    def test_exhausted_retries_surface_store_unavailable(self):
        carts = FakeCartStore()
        carts.inject_conflicts = 100
        retry = RetryConfig(
            max_attempts=3, initial_wait_seconds=0.0, max_wait_seconds=0.0, jitter_seconds=0.0
        )
        tx = CartTransaction(carts, retry=retry)

        with capture_logs() as logs:
            with pytest.raises(StoreUnavailableError, match="3 attempts"):
                tx.run("u1", lambda c: c.clear())

        assert carts.save_attempts == 3
        assert any(e["event"] == "cart_conflict_retries_exhausted" for e in logs)

    def test_domain_errors_are_not_retried(self, fast_retry):
        carts = FakeCartStore()
        tx = CartTransaction(carts, retry=fast_retry)
        with pytest.raises(ItemNotFoundError):
            tx.run("u1", lambda c: c.set_quantity("ghost", 2))
        assert carts.save_attempts == 0

    def test_store_failure_is_not_retried(self, fast_retry):
        carts = FakeCartStore()
        carts.fail_saves = True
        tx = CartTransaction(carts, retry=fast_retry)
        with pytest.raises(StoreUnavailableError):
            tx.run("u1", lambda c: c.clear())
        assert carts.save_attempts == 1

    def test_version_advances_on_each_save(self, fast_retry):
        carts = FakeCartStore()
        tx = CartTransaction(carts, retry=fast_retry)
        tx.run("u1", lambda c: c.clear())
        tx.run("u1", lambda c: c.clear())
        assert carts.get("u1").version == 3
