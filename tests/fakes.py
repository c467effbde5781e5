"""In-memory fake stores for testing.

These implement the same abstract interfaces as the JSON stores
but keep everything in a dict. No file I/O, no side effects.

Stores hand out copies, like the JSON stores do, so a mutated cart is
not visible to other readers until it is saved.
"""

from __future__ import annotations

import copy
import json
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    DuplicatePaymentEventError,
    OrderNotFoundError,
    StoreUnavailableError,
    WebhookVerificationError,
)
from storefront.domain.gateway.payment_gateway import PaymentWebhookVerifier
from storefront.domain.model.cart import Cart
from storefront.domain.model.catalog import ProductFilter, ProductPage, apply_filter
from storefront.domain.model.order import Order
from storefront.domain.model.payment import PaymentEventKind, PaymentNotification
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.store.cart_store import CartStore
from storefront.domain.store.order_store import OrderStore
from storefront.domain.store.payment_event_store import (
    DEFAULT_CLAIM_LEASE,
    PaymentEventRecord,
    PaymentEventStore,
)
from storefront.domain.store.product_store import ProductStore

VALID_SIGNATURE = "test-signature"


class FakeCartStore(CartStore):
    """Versioned cart store.

    ``inject_conflicts`` makes the next N saves lose a compare-and-set as if
    another writer had won; ``fail_saves`` makes every save fail with
    StoreUnavailableError.
    """

    def __init__(self, carts: list[Cart] | None = None) -> None:
        self._store: dict[str, Cart] = {}
        self._lock = threading.Lock()
        self.inject_conflicts = 0
        self.fail_saves = False
        self.save_attempts = 0
        for cart in carts or []:
            cart.version = max(cart.version, 1)
            self._store[cart.user_id] = copy.deepcopy(cart)

    def get(self, user_id: str) -> Cart | None:
        with self._lock:
            cart = self._store.get(user_id)
            return copy.deepcopy(cart) if cart is not None else None

    def get_or_create(self, user_id: str) -> tuple[Cart, bool]:
        with self._lock:
            if user_id in self._store:
                return copy.deepcopy(self._store[user_id]), False
            cart = Cart(user_id=user_id, version=1)
            self._store[user_id] = copy.deepcopy(cart)
            return cart, True

    def save(self, cart: Cart, expected_version: int) -> None:
        with self._lock:
            self.save_attempts += 1
            if self.fail_saves:
                raise StoreUnavailableError("cart store is down")
            if self.inject_conflicts > 0:
                self.inject_conflicts -= 1
                raise ConcurrencyConflictError("injected conflict")
            stored = self._store.get(cart.user_id)
            current = stored.version if stored is not None else 0
            if current != expected_version:
                raise ConcurrencyConflictError(
                    f"version {current} != expected {expected_version}"
                )
            cart.version = expected_version + 1
            self._store[cart.user_id] = copy.deepcopy(cart)


class FakeOrderStore(OrderStore):
    """Versioned order store; ``inject_conflicts`` works as on FakeCartStore.

    ``before_next_save`` runs once, just before the next save checks its
    version, to let a competing writer land in between.
    """

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}
        self._next_id = 1
        self.inject_conflicts = 0
        self.before_next_save: Callable[[], None] | None = None

    def add(self, order: Order) -> None:
        order.id = f"order-{self._next_id}"
        order.version = 1
        self._next_id += 1
        self._store[order.id] = copy.deepcopy(order)

    def get_by_id(self, order_id: str) -> Order | None:
        order = self._store.get(order_id)
        return copy.deepcopy(order) if order is not None else None

    def save(self, order: Order, expected_version: int) -> None:
        if self.before_next_save is not None:
            competitor, self.before_next_save = self.before_next_save, None
            competitor()
        stored = self._store.get(order.id)  # type: ignore[arg-type]
        if stored is None:
            raise OrderNotFoundError(f"Order '{order.id}' not found")
        if self.inject_conflicts > 0:
            self.inject_conflicts -= 1
            raise ConcurrencyConflictError("injected conflict")
        if stored.version != expected_version:
            raise ConcurrencyConflictError(
                f"version {stored.version} != expected {expected_version}"
            )
        order.version = expected_version + 1
        stored.version = order.version
        stored.status = order.status
        stored.payment_status = order.payment_status
        stored.payment_id = order.payment_id
        stored.updated_at = order.updated_at

    def list_for_user(self, user_id: str) -> list[Order]:
        return [o for o in self._newest_first() if o.user_id == user_id]

    def list_recent(self, limit: int = 10) -> list[Order]:
        return self._newest_first()[:limit]

    def find_by_payment_id(self, payment_id: str) -> Order | None:
        for order in self._store.values():
            if order.payment_id == payment_id:
                return copy.deepcopy(order)
        return None

    def all(self) -> list[Order]:
        return [copy.deepcopy(o) for o in self._store.values()]

    def _newest_first(self) -> list[Order]:
        orders = [copy.deepcopy(o) for o in reversed(list(self._store.values()))]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders


class FakeProductStore(ProductStore):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def fetch_product(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def fetch_products(self, query: ProductFilter) -> ProductPage:
        return apply_filter(list(self._store.values()), query)

    def list_categories(self) -> list[str]:
        return sorted({p.category for p in self._store.values() if p.category})

    def save(self, product: Product) -> None:
        self._store[product.id] = product


class FakePaymentEventStore(PaymentEventStore):
    """``get`` returns the live record, so tests can age a claim in place."""

    def __init__(self, lease: timedelta = DEFAULT_CLAIM_LEASE) -> None:
        self._store: dict[str, PaymentEventRecord] = {}
        self._lease = lease

    def claim(self, event_id: str, event_type: str) -> PaymentEventRecord:
        now = datetime.now(timezone.utc)
        attempts = 1
        previous = self._store.get(event_id)
        if previous is not None:
            if not previous.lease_expired(self._lease, now):
                raise DuplicatePaymentEventError(event_id)
            attempts = previous.attempts + 1
        record = PaymentEventRecord(event_id, event_type, now, attempts=attempts)
        self._store[event_id] = record
        return record

    def complete(self, event_id: str, outcome: str, order_id: str | None = None) -> None:
        record = self._store.get(event_id)
        if record is not None:
            record.outcome = outcome
            record.order_id = order_id

    def release(self, event_id: str) -> None:
        self._store.pop(event_id, None)

    def get(self, event_id: str) -> PaymentEventRecord | None:
        return self._store.get(event_id)


class FakeWebhookVerifier(PaymentWebhookVerifier):
    """Accepts ``VALID_SIGNATURE`` and a payload built by ``notification_payload``."""

    def parse(self, payload: bytes | str, signature: str) -> PaymentNotification:
        if signature != VALID_SIGNATURE:
            raise WebhookVerificationError("Invalid signature")
        raw = json.loads(payload)
        cents = raw.get("amount_cents")
        return PaymentNotification(
            event_id=raw["event_id"],
            kind=PaymentEventKind(raw["kind"]),
            event_type=raw.get("event_type", "test.event"),
            session_id=raw.get("session_id"),
            payment_id=raw.get("payment_id"),
            amount=Money.from_cents(cents) if cents is not None else None,
            user_id=raw.get("user_id"),
            customer_name=raw.get("customer_name", ""),
            customer_email=raw.get("customer_email", ""),
            failure_message=raw.get("failure_message", ""),
        )


def notification_payload(event_id: str, kind: str = "completed", **fields) -> str:
    return json.dumps({"event_id": event_id, "kind": kind, **fields})
