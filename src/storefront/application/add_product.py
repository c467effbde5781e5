"""Application service: Add Product use case (admin)."""

from __future__ import annotations

from uuid import uuid4

from storefront.application.dto import ProductDTO
from storefront.application.identity import require_admin
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.catalog import MAX_PAGE_SIZE, ProductFilter
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.store.product_store import ProductStore


class AddProductHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(
        self,
        is_admin: bool,
        name: str,
        price: str,
        category: str = "",
        description: str = "",
        inventory: int = 0,
        images: list[str] | None = None,
        sale_price: str | None = None,
        on_sale: bool = False,
        product_id: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog."""
        require_admin(is_admin)
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        name = name.strip()

        if product_id and self._product_store.fetch_product(product_id) is not None:
            raise ValidationError(f"Product '{product_id}' already exists")

        same_prefix = self._product_store.fetch_products(
            ProductFilter(search=name, page_size=MAX_PAGE_SIZE)
        )
        if any(p.name.lower() == name.lower() for p in same_prefix.products):
            raise ValidationError(f"Product '{name}' already exists")

        product = Product(
            id=product_id or uuid4().hex[:12],
            name=name,
            price=Money.of(price),
            sale_price=Money.of(sale_price) if sale_price is not None else None,
            on_sale=on_sale,
            description=description,
            images=list(images or []),
            category=category,
            inventory=inventory,
        )
        self._product_store.save(product)
        return ProductDTO.from_product(product)
