"""Cart aggregate, one per shopper identity.

The Cart owns its line items and a derived total.  Every mutation
recomputes the total from the line items; the stored total is never
patched incrementally.

Mutations here are pure in-memory changes.  Making them atomic against
concurrent writers is the job of ``CartTransaction`` in the application
layer, which wraps them in a compare-and-set on ``version``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ItemNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


@dataclass
class CartLineItem:
    """One product in the cart with its price/name/image snapshot."""

    product_id: str
    quantity: int
    unit_price: Money
    name: str = ""
    image: str = ""

    def __post_init__(self) -> None:
        Quantity(self.quantity)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Aggregate root for a shopper's cart.

    Invariants:
    - at most one line item per ``product_id``
    - ``total`` equals the sum of every line's ``unit_price * quantity``

    ``version`` is the optimistic-concurrency token; 0 means the cart has
    never been saved.
    """

    user_id: str
    items: list[CartLineItem] = field(default_factory=list)
    total: Money = field(default_factory=Money.zero)
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for item in self.items:
            if item.product_id in seen:
                raise ValidationError(
                    f"Duplicate line item for product '{item.product_id}'"
                )
            seen.add(item.product_id)

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int = 1) -> CartLineItem:
        """Add *quantity* units of *product*.

        If the product is already in the cart, its quantity is topped up by
        *quantity* and the whole line is re-priced at the product's current
        effective price.  A new line starts with at least one unit.  Adding
        never shrinks an existing line; use ``set_quantity`` for that.
        """
        price = product.effective_price
        existing = self.find(product.id)
        if existing is not None:
            existing.quantity += max(quantity, 0)
            existing.unit_price = price
            line = existing
        else:
            line = CartLineItem(
                product_id=product.id,
                quantity=max(quantity, 1),
                unit_price=price,
                name=product.name,
                image=product.primary_image,
            )
            self.items.append(line)
        self._recompute()
        return line

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity exactly; zero or less removes the line.

        The line must exist either way.
        """
        item = self.find(product_id)
        if item is None:
            raise ItemNotFoundError(f"Product '{product_id}' is not in the cart")
        if quantity <= 0:
            self.remove(product_id)
            return
        item.quantity = quantity
        self._recompute()

    def remove(self, product_id: str) -> None:
        self.items = [i for i in self.items if i.product_id != product_id]
        self._recompute()

    def clear(self) -> None:
        self.items = []
        self._recompute()

    # --- Queries --------------------------------------------------------------

    def find(self, product_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    # --- Internal helpers -----------------------------------------------------

    def _recompute(self) -> None:
        self.total = Money.sum(
            (i.line_total for i in self.items), self.total.currency
        )
        self.updated_at = datetime.now(timezone.utc)
