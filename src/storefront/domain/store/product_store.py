"""Abstract store for the Product catalog.

Carts only ever read from it (``fetch_product`` at add time).  Writes
come from the admin catalog handlers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import ProductFilter, ProductPage
from storefront.domain.model.product import Product


class ProductStore(ABC):

    @abstractmethod
    def fetch_product(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def fetch_products(self, query: ProductFilter) -> ProductPage:
        """Return one page of products matching *query*."""

    @abstractmethod
    def list_categories(self) -> list[str]:
        """Return the distinct categories in the catalog, sorted."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
