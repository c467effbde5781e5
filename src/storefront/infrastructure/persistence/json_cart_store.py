"""JSON-file-backed implementation of CartStore.

Document layout (one per shopper, keyed by user id)::

    {"userId": ..., "items": [...], "total": "25.00", "currency": "USD",
     "updatedAt": "...", "version": 3}
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from storefront.domain.exceptions import ConcurrencyConflictError
from storefront.domain.model.cart import Cart, CartLineItem
from storefront.domain.model.value_objects import Money
from storefront.domain.store.cart_store import CartStore
from storefront.infrastructure.persistence.json_collection import JsonCollection


class JsonCartStore(CartStore):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    # --- CartStore interface --------------------------------------------------

    def get(self, user_id: str) -> Cart | None:
        raw = self._collection.read().get(user_id)
        return self._to_domain(raw) if raw is not None else None

    def get_or_create(self, user_id: str) -> tuple[Cart, bool]:
        with self._collection.update() as documents:
            raw = documents.get(user_id)
            if raw is not None:
                return self._to_domain(raw), False
            cart = Cart(user_id=user_id, version=1)
            documents[user_id] = self._to_raw(cart)
            return cart, True

    def save(self, cart: Cart, expected_version: int) -> None:
        with self._collection.update() as documents:
            current = documents.get(cart.user_id, {}).get("version", 0)
            if current != expected_version:
                raise ConcurrencyConflictError(
                    f"Cart '{cart.user_id}' is at version {current}, "
                    f"expected {expected_version}"
                )
            cart.version = expected_version + 1
            documents[cart.user_id] = self._to_raw(cart)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "userId": cart.user_id,
            "items": [
                {
                    "productId": item.product_id,
                    "quantity": item.quantity,
                    "price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "name": item.name,
                    "image": item.image,
                }
                for item in cart.items
            ],
            "total": str(cart.total.amount),
            "currency": cart.total.currency,
            "updatedAt": cart.updated_at.isoformat(),
            "version": cart.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        items = [
            CartLineItem(
                product_id=i["productId"],
                quantity=i["quantity"],
                unit_price=Money(Decimal(i["price"]), i.get("currency", "USD")),
                name=i.get("name", ""),
                image=i.get("image", ""),
            )
            for i in raw.get("items", [])
        ]
        return Cart(
            user_id=raw["userId"],
            items=items,
            total=Money(Decimal(raw.get("total", "0")), raw.get("currency", "USD")),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
            version=raw.get("version", 0),
        )
