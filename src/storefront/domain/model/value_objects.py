"""Money, quantities and addresses.

Frozen dataclasses: equal when their fields are equal, and validated on
construction so a cart or order never holds a malformed amount.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering
from typing import Iterable

from storefront.domain.exceptions import ValidationError

_CENT = Decimal("0.01")


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative Decimal amount in a single currency.

    Line totals and cart totals are built only from ``+`` and ``* int`` so
    that 3 x 9.99 is exactly 29.97.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Expected a Decimal amount, got {type(self.amount).__name__}"
            )
        if self.amount.is_signed() and self.amount != 0:
            raise ValidationError(f"Amount cannot be negative: {self.amount}")

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same(other).amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Money can only be scaled by an int, not {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._same(other).amount

    @property
    def cents(self) -> int:
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def __str__(self) -> str:
        return f"${self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)}"

    def _same(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )
        return other

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Parse *amount* through ``str`` so floats keep their printed value."""
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return Money(value, currency.upper())

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    @staticmethod
    def from_cents(cents: int, currency: str = "USD") -> Money:
        """Payment providers report amounts in minor units."""
        return Money((Decimal(cents) / 100).quantize(_CENT), currency.upper())

    @staticmethod
    def sum(amounts: Iterable[Money], currency: str = "USD") -> Money:
        total = Money.zero(currency)
        for amount in amounts:
            total = total + amount
        return total


@dataclass(frozen=True)
class Quantity:
    """Units on a line item; always at least one."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError(f"Quantity must be positive, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Address:
    """Postal address attached to an order.

    Every field is optional: orders created from a payment notification
    only know the customer's name and e-mail.
    """

    full_name: str = ""
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    phone: str = ""
    email: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @staticmethod
    def from_dict(raw: dict | None) -> Address:
        raw = raw or {}
        known = Address.__dataclass_fields__
        return Address(**{k: str(v) for k, v in raw.items() if k in known and v is not None})

    def __str__(self) -> str:
        parts = [self.full_name, self.line1, self.line2, self.city, self.state,
                 self.postal_code, self.country]
        return ", ".join(p for p in parts if p)
