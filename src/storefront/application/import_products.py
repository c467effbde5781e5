"""Application service: Import Products use case (admin catalog seeding).

Records use the catalog's document field names (camelCase), e.g.::

    {"id": "p-1", "name": "Desk Lamp", "price": "24.99", "salePrice": "19.99",
     "onSale": true, "images": ["..."], "category": "Home & Kitchen",
     "inventory": 12, "popularity": 40}

``inStock`` is accepted in place of ``inventory`` (true maps to one unit).
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from storefront.application.identity import require_admin
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.store.product_store import ProductStore


def product_from_record(record: dict) -> Product:
    try:
        name = record["name"]
        price = record["price"]
    except KeyError as exc:
        raise ValidationError(f"Product record is missing '{exc.args[0]}'") from exc

    inventory = record.get("inventory")
    if inventory is None:
        inventory = 1 if record.get("inStock", False) else 0

    extra: dict = {}
    if record.get("createdAt"):
        created = datetime.fromisoformat(record["createdAt"])
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        extra["created_at"] = created

    return Product(
        id=str(record.get("id") or uuid4().hex[:12]),
        name=name,
        price=Money.of(price),
        sale_price=Money.of(record["salePrice"]) if record.get("salePrice") is not None else None,
        on_sale=bool(record.get("onSale", False)),
        description=record.get("description", ""),
        images=list(record.get("images", [])),
        category=record.get("category", ""),
        inventory=int(inventory),
        rating=float(record.get("rating", 0.0)),
        review_count=int(record.get("reviewCount", 0)),
        popularity=int(record.get("popularity", 0)),
        **extra,
    )


class ImportProductsHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(self, is_admin: bool, records: list[dict]) -> int:
        """Validate every record first, then save them all.

        Returns the number of products written.
        """
        require_admin(is_admin)

        # Phase 1: parse everything so one bad record leaves the catalog untouched
        products = []
        for index, record in enumerate(records, start=1):
            try:
                products.append(product_from_record(record))
            except (ValidationError, ValueError, TypeError) as exc:
                raise ValidationError(f"Record #{index}: {exc}") from exc

        # Phase 2: persist
        for product in products:
            self._product_store.save(product)
        return len(products)
