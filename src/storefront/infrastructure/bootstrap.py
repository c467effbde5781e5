"""Composition root: builds the JSON stores, the cart transaction and the
webhook verifier from StorefrontSettings.
"""

from __future__ import annotations

from datetime import timedelta

from storefront.application.cart_transaction import CartTransaction
from storefront.config import StorefrontSettings
from storefront.infrastructure.payments.stripe_webhook import StripeWebhookVerifier
from storefront.infrastructure.persistence.json_cart_store import JsonCartStore
from storefront.infrastructure.persistence.json_collection import JsonCollection
from storefront.infrastructure.persistence.json_order_store import JsonOrderStore
from storefront.infrastructure.persistence.json_payment_event_store import (
    JsonPaymentEventStore,
)
from storefront.infrastructure.persistence.json_product_store import (
    JsonProductStore,
)


def load_settings() -> StorefrontSettings:
    return StorefrontSettings()


def _collection(settings: StorefrontSettings, name: str) -> JsonCollection:
    return JsonCollection(
        settings.data_dir / f"{name}.json", timeout=settings.store_timeout_seconds
    )


def cart_store(settings: StorefrontSettings) -> JsonCartStore:
    return JsonCartStore(_collection(settings, "carts"))


def order_store(settings: StorefrontSettings) -> JsonOrderStore:
    return JsonOrderStore(_collection(settings, "orders"))


def product_store(settings: StorefrontSettings) -> JsonProductStore:
    return JsonProductStore(_collection(settings, "products"))


def payment_event_store(settings: StorefrontSettings) -> JsonPaymentEventStore:
    return JsonPaymentEventStore(
        _collection(settings, "payment_events"),
        lease=timedelta(seconds=settings.payment_claim_lease_seconds),
    )


def cart_transaction(settings: StorefrontSettings, store: JsonCartStore | None = None) -> CartTransaction:
    return CartTransaction(store or cart_store(settings), retry=settings.cart_retry)


def webhook_verifier(settings: StorefrontSettings) -> StripeWebhookVerifier:
    secret = settings.webhook_secret.get_secret_value() if settings.webhook_secret else None
    return StripeWebhookVerifier(secret, tolerance=settings.webhook_tolerance_seconds)
