"""Payment notifications as the domain sees them.

Provider-specific payloads are decoded by the gateway adapter into a
``PaymentNotification``; the reducer never looks at raw provider JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.model.value_objects import Money


class PaymentEventKind(Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    IGNORED = "ignored"


class PaymentOutcome(Enum):
    ORDER_CREATED = "order_created"
    ORDER_CONFIRMED = "order_confirmed"
    DUPLICATE = "duplicate"
    EMPTY_CART = "empty_cart"
    FAILURE_RECORDED = "failure_recorded"
    IGNORED = "ignored"


@dataclass(frozen=True)
class PaymentNotification:
    event_id: str
    kind: PaymentEventKind
    event_type: str
    session_id: str | None = None
    payment_id: str | None = None
    amount: Money | None = None
    user_id: str | None = None
    customer_name: str = ""
    customer_email: str = ""
    failure_message: str = ""
