"""Second step of the order-then-clear-cart saga.

Order creation and cart clearing are two separate writes to two
collections; there is no transaction spanning both.  The order is always
written first.  If clearing the cart fails afterwards the order stays
valid, and ``ClearFailureMode`` decides whether the caller hears about it.
"""

from __future__ import annotations

import structlog

from storefront.application.cart_transaction import CartTransaction
from storefront.config import DEFAULT_CLEAR_FAILURE_MODE, ClearFailureMode
from storefront.domain.exceptions import StoreUnavailableError

logger = structlog.get_logger(__name__)


def clear_cart_after_order(
    transaction: CartTransaction,
    user_id: str,
    order_id: str,
    mode: ClearFailureMode = DEFAULT_CLEAR_FAILURE_MODE,
) -> bool:
    """Empty the shopper's cart once *order_id* is persisted.

    Returns True if the cart was cleared.  With ``ClearFailureMode.WARN`` a
    store failure is logged and False is returned; with ``RAISE`` the
    StoreUnavailableError propagates.  The order is never rolled back.
    """
    try:
        transaction.run(user_id, lambda c: c.clear())
    except StoreUnavailableError as exc:
        logger.warning(
            "cart_clear_failed_after_order",
            user_id=user_id,
            order_id=order_id,
            error=str(exc),
        )
        if mode is ClearFailureMode.RAISE:
            raise
        return False
    return True
