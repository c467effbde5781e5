"""CLI entry for payment provider notifications.

Reads the raw request body from a file (or stdin) together with the
signature header, mirroring the HTTP webhook contract: a rejected
signature is reported as ``400`` and nothing is written.
"""

from __future__ import annotations

import click

from storefront.application.process_payment_event import PaymentEventHandler
from storefront.config import StorefrontSettings
from storefront.domain.exceptions import DomainException, WebhookVerificationError
from storefront.infrastructure.bootstrap import (
    cart_store,
    cart_transaction,
    order_store,
    payment_event_store,
    webhook_verifier,
)


@click.command("receive")
@click.option(
    "--signature",
    required=True,
    envvar="STRIPE_SIGNATURE",
    help="Value of the Stripe-Signature header.",
)
@click.argument("payload", type=click.File("rb"), default="-")
@click.pass_obj
def webhook_receive(settings: StorefrontSettings, signature: str, payload) -> None:
    """Process one payment notification body (PAYLOAD file or stdin)."""
    body = payload.read()
    store = cart_store(settings)
    handler = PaymentEventHandler(
        verifier=webhook_verifier(settings),
        event_store=payment_event_store(settings),
        cart_store=store,
        order_store=order_store(settings),
        transaction=cart_transaction(settings, store),
        clear_failure_mode=settings.clear_failure_mode,
        order_retry=settings.cart_retry,
    )

    try:
        result = handler.handle(body, signature)
    except WebhookVerificationError as exc:
        raise click.ClickException(f"400 Bad Request: {exc}")
    except DomainException as exc:
        raise click.ClickException(f"500 Internal Server Error: {exc}")

    order = f" order={result.order_id}" if result.order_id else ""
    click.echo(f"200 OK event={result.event_id} outcome={result.outcome}{order}")
