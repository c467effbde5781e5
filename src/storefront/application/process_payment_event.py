"""Application service: Process Payment Event (webhook) use case.

Consumes payment-provider notifications and turns a completed payment
into an Order.  Providers redeliver, so the handler is idempotent:

- the provider event id is claimed once in the PaymentEventStore; a second
  delivery of the same event is acknowledged without effects;
- an order already linked to the payment id, or to the checkout session
  id, is confirmed instead of duplicated;
- a cart that is already empty (cleared by an earlier delivery) is a no-op.

Signature verification happens before anything else; an unverifiable
notification is rejected with no partial effects.
"""

from __future__ import annotations

import structlog

from storefront.application.cart_transaction import CartTransaction
from storefront.application.dto import PaymentEventResult
from storefront.application.order_saga import clear_cart_after_order
from storefront.application.order_transaction import OrderTransaction
from storefront.config import DEFAULT_CLEAR_FAILURE_MODE, ClearFailureMode, RetryConfig
from storefront.domain.exceptions import DuplicatePaymentEventError
from storefront.domain.gateway.payment_gateway import PaymentWebhookVerifier
from storefront.domain.model.order import Order, PaymentStatus
from storefront.domain.model.payment import (
    PaymentEventKind,
    PaymentNotification,
    PaymentOutcome,
)
from storefront.domain.model.value_objects import Address
from storefront.domain.store.cart_store import CartStore
from storefront.domain.store.order_store import OrderStore
from storefront.domain.store.payment_event_store import PaymentEventStore

logger = structlog.get_logger(__name__)


class PaymentEventHandler:

    def __init__(
        self,
        verifier: PaymentWebhookVerifier,
        event_store: PaymentEventStore,
        cart_store: CartStore,
        order_store: OrderStore,
        transaction: CartTransaction,
        clear_failure_mode: ClearFailureMode = DEFAULT_CLEAR_FAILURE_MODE,
        order_retry: RetryConfig | None = None,
    ) -> None:
        self._verifier = verifier
        self._event_store = event_store
        self._cart_store = cart_store
        self._order_store = order_store
        self._transaction = transaction
        self._clear_failure_mode = clear_failure_mode
        self._order_transaction = OrderTransaction(order_store, order_retry)

    def handle(self, payload: bytes | str, signature: str) -> PaymentEventResult:
        # Raises WebhookVerificationError before any state change.
        notification = self._verifier.parse(payload, signature)
        log = logger.bind(event_id=notification.event_id, event_type=notification.event_type)
        log.info("payment_event_received", kind=notification.kind.value)

        if notification.kind is PaymentEventKind.IGNORED:
            log.info("payment_event_ignored")
            return PaymentEventResult(notification.event_id, PaymentOutcome.IGNORED.value)

        try:
            claim = self._event_store.claim(notification.event_id, notification.event_type)
        except DuplicatePaymentEventError:
            log.info("payment_event_duplicate")
            return PaymentEventResult(notification.event_id, PaymentOutcome.DUPLICATE.value)
        if claim.attempts > 1:
            log.warning("payment_event_reclaimed", attempts=claim.attempts)

        try:
            if notification.kind is PaymentEventKind.FAILED:
                outcome, order_id = self._record_failure(notification)
            else:
                outcome, order_id = self._complete(notification)
        except Exception:
            # Let the provider's redelivery retry from scratch.
            self._event_store.release(notification.event_id)
            raise

        self._event_store.complete(notification.event_id, outcome.value, order_id)
        return PaymentEventResult(notification.event_id, outcome.value, order_id)

    # --- Event kinds ----------------------------------------------------------

    @staticmethod
    def _record_failure(n: PaymentNotification) -> tuple[PaymentOutcome, str | None]:
        logger.warning(
            "payment_failed",
            event_id=n.event_id,
            payment_id=n.payment_id,
            user_id=n.user_id,
            amount=str(n.amount) if n.amount is not None else None,
            reason=n.failure_message,
        )
        return PaymentOutcome.FAILURE_RECORDED, None

    def _complete(self, n: PaymentNotification) -> tuple[PaymentOutcome, str | None]:
        # Checkout may have stored either the payment intent or the session id.
        for ref in (n.payment_id, n.session_id):
            if ref:
                existing = self._order_store.find_by_payment_id(ref)
                if existing is not None:
                    return self._confirm_existing(existing, n)

        payment_ref = n.payment_id or n.session_id

        if not n.user_id:
            logger.error("payment_event_missing_user", event_id=n.event_id)
            return PaymentOutcome.IGNORED, None

        cart = self._cart_store.get(n.user_id)
        if cart is None or cart.is_empty:
            logger.info("payment_event_empty_cart", event_id=n.event_id, user_id=n.user_id)
            return PaymentOutcome.EMPTY_CART, None

        if n.amount is not None and n.amount != cart.total:
            logger.warning(
                "payment_amount_mismatch",
                event_id=n.event_id,
                user_id=n.user_id,
                paid=str(n.amount),
                cart_total=str(cart.total),
            )

        contact = Address(full_name=n.customer_name, email=n.customer_email)
        order = Order.from_cart(
            cart,
            shipping_address=contact,
            billing_address=contact,
            payment_id=payment_ref,
            payment_status=PaymentStatus.PAID,
            payment_event_id=n.event_id,
        )
        self._order_store.add(order)
        logger.info(
            "order_created_from_payment",
            event_id=n.event_id,
            order_id=order.id,
            user_id=n.user_id,
            total=str(order.total),
        )

        clear_cart_after_order(
            self._transaction, n.user_id, order.id, self._clear_failure_mode  # type: ignore[arg-type]
        )
        return PaymentOutcome.ORDER_CREATED, order.id

    def _confirm_existing(
        self, order: Order, n: PaymentNotification
    ) -> tuple[PaymentOutcome, str | None]:
        if order.payment_status is not PaymentStatus.PAID:
            self._order_transaction.run(order.id, _mark_paid)  # type: ignore[arg-type]
            logger.info("order_payment_confirmed", event_id=n.event_id, order_id=order.id)
        return PaymentOutcome.ORDER_CONFIRMED, order.id


def _mark_paid(order: Order) -> None:
    if order.payment_status is not PaymentStatus.PAID:
        order.record_payment(PaymentStatus.PAID)
