"""Application services: catalog reads (queries).

The catalog is read-only from the shopper's side; these handlers only
translate between DTOs and the ProductStore.
"""

from __future__ import annotations

from storefront.application.dto import ProductDTO, ProductPageDTO
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.catalog import ProductFilter
from storefront.domain.store.product_store import ProductStore


class BrowseProductsHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(self, query: ProductFilter | None = None) -> ProductPageDTO:
        page = self._product_store.fetch_products(query or ProductFilter())
        return ProductPageDTO.from_page(page)


class ShowProductHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_store.fetch_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product '{product_id}' not found")
        return ProductDTO.from_product(product)


class ListCategoriesHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(self) -> list[str]:
        return self._product_store.list_categories()
