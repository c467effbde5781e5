"""Application service: Update Product use case (admin)."""

from __future__ import annotations

from storefront.application.dto import ProductDTO
from storefront.application.identity import require_admin
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.value_objects import Money
from storefront.domain.store.product_store import ProductStore


class UpdateProductHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(
        self,
        is_admin: bool,
        product_id: str,
        price: str | None = None,
        sale_price: str | None = None,
        on_sale: bool | None = None,
        inventory: int | None = None,
        clear_sale_price: bool = False,
    ) -> ProductDTO:
        """Update a product's pricing and/or inventory.

        This does NOT affect existing orders; they captured a price
        snapshot at creation time.  Cart lines pick up the new price the
        next time the shopper adds the same product.
        """
        require_admin(is_admin)
        product = self._product_store.fetch_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product '{product_id}' not found")

        if price is not None or sale_price is not None or on_sale is not None or clear_sale_price:
            product.update_pricing(
                price=Money.of(price) if price is not None else None,
                sale_price=Money.of(sale_price) if sale_price is not None else None,
                on_sale=on_sale,
                clear_sale_price=clear_sale_price,
            )
        if inventory is not None:
            product.set_inventory(inventory)

        self._product_store.save(product)
        return ProductDTO.from_product(product)
