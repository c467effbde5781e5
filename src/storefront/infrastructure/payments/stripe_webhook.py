"""Stripe webhook adapter.

Verifies the ``Stripe-Signature`` header with the stripe-python SDK and
decodes the Checkout/PaymentIntent event into a PaymentNotification.
Amounts arrive in minor units (cents).
"""

from __future__ import annotations

import json

import stripe

from storefront.domain.exceptions import ValidationError, WebhookVerificationError
from storefront.domain.gateway.payment_gateway import PaymentWebhookVerifier
from storefront.domain.model.payment import PaymentEventKind, PaymentNotification
from storefront.domain.model.value_objects import Money

SESSION_COMPLETED = "checkout.session.completed"
SESSION_ASYNC_SUCCEEDED = "checkout.session.async_payment_succeeded"
SESSION_ASYNC_FAILED = "checkout.session.async_payment_failed"
PAYMENT_INTENT_FAILED = "payment_intent.payment_failed"


class StripeWebhookVerifier(PaymentWebhookVerifier):

    def __init__(self, secret: str | None, tolerance: int = 300) -> None:
        self._secret = secret
        self._tolerance = tolerance

    def parse(self, payload: bytes | str, signature: str) -> PaymentNotification:
        if not self._secret:
            raise WebhookVerificationError("Webhook secret is not configured")
        if not signature:
            raise WebhookVerificationError("Missing signature header")

        try:
            body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        except UnicodeDecodeError as exc:
            raise WebhookVerificationError("Payload is not valid UTF-8") from exc

        try:
            stripe.WebhookSignature.verify_header(
                body, signature, self._secret, tolerance=self._tolerance
            )
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError(f"Invalid signature: {exc}") from exc

        try:
            event = json.loads(body)
            return self._to_notification(event)
        except (ValueError, KeyError, TypeError, ValidationError) as exc:
            raise WebhookVerificationError(f"Malformed event payload: {exc}") from exc

    @staticmethod
    def _to_notification(event: dict) -> PaymentNotification:
        event_id = event["id"]
        event_type = event["type"]
        obj = event.get("data", {}).get("object", {}) or {}

        if event_type == SESSION_COMPLETED and obj.get("payment_status") == "paid":
            kind = PaymentEventKind.COMPLETED
        elif event_type == SESSION_ASYNC_SUCCEEDED:
            kind = PaymentEventKind.COMPLETED
        elif event_type in (SESSION_ASYNC_FAILED, PAYMENT_INTENT_FAILED):
            kind = PaymentEventKind.FAILED
        else:
            return PaymentNotification(
                event_id=event_id, kind=PaymentEventKind.IGNORED, event_type=event_type
            )

        if event_type == PAYMENT_INTENT_FAILED:
            session_id = None
            payment_id = obj.get("id")
            cents = obj.get("amount")
        else:
            session_id = obj.get("id")
            payment_id = obj.get("payment_intent")
            cents = obj.get("amount_total")

        currency = (obj.get("currency") or "usd").upper()
        metadata = obj.get("metadata") or {}
        customer = obj.get("customer_details") or {}
        error = obj.get("last_payment_error") or {}

        return PaymentNotification(
            event_id=event_id,
            kind=kind,
            event_type=event_type,
            session_id=session_id,
            payment_id=payment_id,
            amount=Money.from_cents(int(cents), currency) if cents is not None else None,
            user_id=metadata.get("userId") or None,
            customer_name=customer.get("name") or "",
            customer_email=customer.get("email") or "",
            failure_message=error.get("message") or "",
        )
