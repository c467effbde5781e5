"""Catalog query model: filtering, sorting and pagination of products.

Every ProductStore adapter funnels its candidate products through
``apply_filter`` so the in-memory fake and the JSON store answer the same
query identically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 12


class SortOrder(Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"
    POPULAR = "popular"


@dataclass(frozen=True)
class ProductFilter:
    """Shopper-facing product query.

    Price bounds are compared against the *effective* price, i.e. what the
    shopper would actually pay.
    """

    categories: tuple[str, ...] = ()
    min_price: Money | None = None
    max_price: Money | None = None
    in_stock: bool | None = None
    on_sale: bool | None = None
    search: str | None = None
    sort_by: SortOrder = SortOrder.NEWEST
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("Page must be 1 or greater")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValidationError("Minimum price cannot exceed maximum price")

    def matches(self, product: Product) -> bool:
        if self.categories and product.category not in self.categories:
            return False
        price = product.effective_price
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False
        if self.in_stock is not None and product.in_stock != self.in_stock:
            return False
        if self.on_sale is not None and product.on_sale != self.on_sale:
            return False
        if self.search and not product.name.lower().startswith(self.search.strip().lower()):
            return False
        return True


@dataclass(frozen=True)
class ProductPage:
    products: list[Product] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


def _sort_key(order: SortOrder):
    if order in (SortOrder.PRICE_ASC, SortOrder.PRICE_DESC):
        return lambda p: (p.effective_price.amount, p.id)
    if order == SortOrder.POPULAR:
        return lambda p: (p.popularity, p.review_count, p.rating)
    return lambda p: p.created_at


def apply_filter(products: Iterable[Product], query: ProductFilter) -> ProductPage:
    """Filter, sort and slice *products* according to *query*."""
    matched = [p for p in products if query.matches(p)]
    matched.sort(
        key=_sort_key(query.sort_by),
        reverse=query.sort_by is not SortOrder.PRICE_ASC,
    )
    start = (query.page - 1) * query.page_size
    return ProductPage(
        products=matched[start:start + query.page_size],
        page=query.page,
        page_size=query.page_size,
        total=len(matched),
    )
