"""JSON-file-backed implementation of ProductStore."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from storefront.domain.model.catalog import ProductFilter, ProductPage, apply_filter
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.store.product_store import ProductStore
from storefront.infrastructure.persistence.json_collection import JsonCollection


class JsonProductStore(ProductStore):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    # --- ProductStore interface -----------------------------------------------

    def fetch_product(self, product_id: str) -> Product | None:
        raw = self._collection.read().get(product_id)
        return self._to_domain(product_id, raw) if raw is not None else None

    def fetch_products(self, query: ProductFilter) -> ProductPage:
        return apply_filter(self._load(), query)

    def list_categories(self) -> list[str]:
        return sorted({p.category for p in self._load() if p.category})

    def save(self, product: Product) -> None:
        with self._collection.update() as documents:
            documents[product.id] = self._to_raw(product)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> list[Product]:
        return [self._to_domain(k, v) for k, v in self._collection.read().items()]

    @staticmethod
    def _to_raw(p: Product) -> dict:
        return {
            "name": p.name,
            "description": p.description,
            "price": str(p.price.amount),
            "salePrice": str(p.sale_price.amount) if p.sale_price is not None else None,
            "currency": p.price.currency,
            "onSale": p.on_sale,
            "images": list(p.images),
            "category": p.category,
            "inventory": p.inventory,
            "rating": p.rating,
            "reviewCount": p.review_count,
            "popularity": p.popularity,
            "createdAt": p.created_at.isoformat(),
            "updatedAt": p.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(product_id: str, raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        sale = raw.get("salePrice")
        return Product(
            id=product_id,
            name=raw["name"],
            price=Money(Decimal(raw["price"]), currency),
            sale_price=Money(Decimal(sale), currency) if sale is not None else None,
            on_sale=raw.get("onSale", False),
            description=raw.get("description", ""),
            images=list(raw.get("images", [])),
            category=raw.get("category", ""),
            inventory=raw.get("inventory", 0),
            rating=raw.get("rating", 0.0),
            review_count=raw.get("reviewCount", 0),
            popularity=raw.get("popularity", 0),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
        )
