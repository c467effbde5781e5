"""Product aggregate.

Products are owned by the catalog.  Carts and orders only ever hold
snapshots of a product's price, name and image, so catalog edits never
reach back into existing cart lines or historical orders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``sale_price`` (when set) never exceeds ``price``
    - ``inventory`` is never negative
    """

    id: str
    name: str
    price: Money
    sale_price: Money | None = None
    on_sale: bool = False
    description: str = ""
    images: list[str] = field(default_factory=list)
    category: str = ""
    inventory: int = 0
    rating: float = 0.0
    review_count: int = 0
    popularity: int = 0
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        self._check_invariants()

    @property
    def effective_price(self) -> Money:
        """Sale price if the product is on sale and one is set, else list price."""
        if self.on_sale and self.sale_price is not None:
            return self.sale_price
        return self.price

    @property
    def in_stock(self) -> bool:
        return self.inventory > 0

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""

    def update_pricing(
        self,
        price: Money | None = None,
        sale_price: Money | None = None,
        on_sale: bool | None = None,
        clear_sale_price: bool = False,
    ) -> None:
        """Change list price and/or sale settings.

        Existing cart lines keep their snapshot until the shopper adds the
        product again; orders are never affected.
        """
        new_price = price if price is not None else self.price
        new_sale = None if clear_sale_price else (sale_price if sale_price is not None else self.sale_price)
        new_on_sale = self.on_sale if on_sale is None else on_sale
        self._check_pricing(new_price, new_sale)
        self.price = new_price
        self.sale_price = new_sale
        self.on_sale = new_on_sale
        self.updated_at = _now()

    def set_inventory(self, count: int) -> None:
        if count < 0:
            raise ValidationError("Inventory count cannot be negative")
        self.inventory = count
        self.updated_at = _now()

    # --- Internal helpers -----------------------------------------------------

    def _check_invariants(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")
        if self.inventory < 0:
            raise ValidationError("Inventory count cannot be negative")
        self._check_pricing(self.price, self.sale_price)

    @staticmethod
    def _check_pricing(price: Money, sale_price: Money | None) -> None:
        if sale_price is not None and sale_price > price:
            raise ValidationError(
                f"Sale price {sale_price} cannot exceed list price {price}"
            )
