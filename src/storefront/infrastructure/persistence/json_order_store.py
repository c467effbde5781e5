"""JSON-file-backed implementation of OrderStore.

Document layout (one per order, keyed by order id)::

    {"userId", "items", "total", "currency", "status", "paymentStatus",
     "paymentId", "paymentEventId", "shippingAddress", "billingAddress",
     "createdAt", "updatedAt", "version"}

``save`` is a compare-and-set on ``version`` and only writes the fields
that may change after creation; items and total are never rewritten.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from storefront.domain.exceptions import ConcurrencyConflictError, OrderNotFoundError
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentStatus
from storefront.domain.model.value_objects import Address, Money
from storefront.domain.store.order_store import OrderStore
from storefront.infrastructure.persistence.json_collection import JsonCollection

_MUTABLE_FIELDS = ("status", "paymentStatus", "paymentId", "updatedAt", "version")


class JsonOrderStore(OrderStore):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    # --- OrderStore interface -------------------------------------------------

    def add(self, order: Order) -> None:
        with self._collection.update() as documents:
            order_id = uuid4().hex
            while order_id in documents:  # pragma: no cover
                order_id = uuid4().hex
            order.id = order_id
            order.version = 1
            documents[order_id] = self._to_raw(order)

    def get_by_id(self, order_id: str) -> Order | None:
        raw = self._collection.read().get(order_id)
        return self._to_domain(order_id, raw) if raw is not None else None

    def save(self, order: Order, expected_version: int) -> None:
        with self._collection.update() as documents:
            if order.id is None or order.id not in documents:
                raise OrderNotFoundError(f"Order '{order.id}' not found")
            stored = documents[order.id]
            current = stored.get("version", 1)
            if current != expected_version:
                raise ConcurrencyConflictError(
                    f"Order '{order.id}' is at version {current}, "
                    f"expected {expected_version}"
                )
            order.version = expected_version + 1
            fresh = self._to_raw(order)
            for key in _MUTABLE_FIELDS:
                stored[key] = fresh[key]

    def list_for_user(self, user_id: str) -> list[Order]:
        return [o for o in self._newest_first() if o.user_id == user_id]

    def list_recent(self, limit: int = 10) -> list[Order]:
        return self._newest_first()[:limit]

    def find_by_payment_id(self, payment_id: str) -> Order | None:
        for order_id, raw in self._collection.read().items():
            if raw.get("paymentId") == payment_id:
                return self._to_domain(order_id, raw)
        return None

    # --- Helpers --------------------------------------------------------------

    def _newest_first(self) -> list[Order]:
        # Later inserts win ties on createdAt.
        orders = [self._to_domain(k, v) for k, v in reversed(list(self._collection.read().items()))]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "userId": order.user_id,
            "items": [
                {
                    "productId": item.product_id,
                    "quantity": item.quantity,
                    "price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "name": item.name,
                    "image": item.image,
                }
                for item in order.items
            ],
            "total": str(order.total.amount),
            "currency": order.total.currency,
            "status": order.status.value,
            "paymentStatus": order.payment_status.value,
            "paymentId": order.payment_id,
            "paymentEventId": order.payment_event_id,
            "shippingAddress": order.shipping_address.to_dict(),
            "billingAddress": order.billing_address.to_dict(),
            "createdAt": order.created_at.isoformat(),
            "updatedAt": order.updated_at.isoformat(),
            "version": order.version,
        }

    @staticmethod
    def _to_domain(order_id: str, raw: dict) -> Order:
        items = tuple(
            OrderLineItem(
                product_id=i["productId"],
                quantity=i["quantity"],
                unit_price=Money(Decimal(i["price"]), i.get("currency", "USD")),
                name=i.get("name", ""),
                image=i.get("image", ""),
            )
            for i in raw["items"]
        )
        return Order(
            id=order_id,
            user_id=raw["userId"],
            items=items,
            total=Money(Decimal(raw["total"]), raw.get("currency", "USD")),
            shipping_address=Address.from_dict(raw.get("shippingAddress")),
            billing_address=Address.from_dict(raw.get("billingAddress")),
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw.get("paymentStatus", "pending")),
            payment_id=raw.get("paymentId"),
            payment_event_id=raw.get("paymentEventId"),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
            version=raw.get("version", 1),
        )
