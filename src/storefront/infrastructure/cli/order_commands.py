"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.checkout import CheckoutHandler
from storefront.application.list_orders import ListOrdersHandler, ListRecentOrdersHandler
from storefront.application.sales_summary import SalesSummaryHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.config import StorefrontSettings
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Address
from storefront.infrastructure.bootstrap import cart_store, cart_transaction, order_store
from storefront.infrastructure.cli.common import (
    admin_option,
    bind_user,
    display_order,
    user_option,
)


@click.command("checkout")
@user_option
@click.option("--name", "full_name", required=True, help="Recipient name.")
@click.option("--line1", required=True, help="Street address.")
@click.option("--line2", default="", help="Apartment, suite, etc.")
@click.option("--city", required=True)
@click.option("--state", default="")
@click.option("--postal-code", required=True)
@click.option("--country", default="US", show_default=True)
@click.option("--phone", default="")
@click.option("--email", default="")
@click.option("--payment-id", default=None, help="Provider payment reference, if already paid.")
@click.pass_obj
def order_checkout(
    settings: StorefrontSettings,
    user_id: str | None,
    full_name: str,
    line1: str,
    line2: str,
    city: str,
    state: str,
    postal_code: str,
    country: str,
    phone: str,
    email: str,
    payment_id: str | None,
) -> None:
    """Turn the cart into an order (billing address = shipping address)."""
    bind_user(user_id)
    address = Address(
        full_name=full_name,
        line1=line1,
        line2=line2,
        city=city,
        state=state,
        postal_code=postal_code,
        country=country,
        phone=phone,
        email=email,
    )
    store = cart_store(settings)
    handler = CheckoutHandler(
        cart_store=store,
        order_store=order_store(settings),
        transaction=cart_transaction(settings, store),
        clear_failure_mode=settings.clear_failure_mode,
    )

    try:
        result = handler.handle(user_id, address, address, payment_id=payment_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{result.order.id} created  (status={result.order.status})")
    click.echo(f"Total: {result.order.total}")
    if not result.cart_cleared:
        click.echo("Warning: the order was saved but the cart could not be cleared.", err=True)


@click.command("list")
@user_option
@click.pass_obj
def order_list(settings: StorefrontSettings, user_id: str | None) -> None:
    """List the shopper's orders, newest first."""
    bind_user(user_id)
    handler = ListOrdersHandler(order_store=order_store(settings))

    try:
        orders = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order_table(orders)


@click.command("show")
@user_option
@admin_option
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.pass_obj
def order_show(settings: StorefrontSettings, user_id: str | None, is_admin: bool, order_id: str) -> None:
    """Show details of an existing order."""
    bind_user(user_id)
    handler = ShowOrderHandler(order_store=order_store(settings))

    try:
        dto = handler.handle(order_id, user_id, is_admin=is_admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("status")
@admin_option
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--to",
    "new_status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="Target status.",
)
@click.pass_obj
def order_status(settings: StorefrontSettings, is_admin: bool, order_id: str, new_status: str) -> None:
    """Move an order through its lifecycle."""
    handler = UpdateOrderStatusHandler(order_store=order_store(settings), retry=settings.cart_retry)

    try:
        dto = handler.handle(order_id, new_status, is_admin=is_admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} is now {dto.status}.")


@click.command("recent")
@admin_option
@click.option("--limit", default=10, type=int, show_default=True)
@click.pass_obj
def order_recent(settings: StorefrontSettings, is_admin: bool, limit: int) -> None:
    """List the most recent orders across all shoppers."""
    handler = ListRecentOrdersHandler(order_store=order_store(settings))

    try:
        orders = handler.handle(is_admin, limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order_table(orders, show_user=True)


@click.command("summary")
@admin_option
@click.pass_obj
def order_summary(settings: StorefrontSettings, is_admin: bool) -> None:
    """Show order counts and paid revenue."""
    handler = SalesSummaryHandler(order_store=order_store(settings))

    try:
        summary = handler.handle(is_admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Orders:        {summary.order_count}")
    for status, count in summary.orders_by_status.items():
        click.echo(f"  {status:<12} {count:>5}")
    click.echo(f"Paid orders:   {summary.paid_order_count}")
    click.echo(f"Revenue:       {summary.paid_revenue}")
    click.echo(f"Average order: {summary.average_paid_order}")


def _display_order_table(orders, show_user: bool = False) -> None:
    if not orders:
        click.echo("No orders found.")
        return

    user_col = f" {'Customer':<14}" if show_user else ""
    click.echo(f"{'ID':<34}{user_col} {'Status':<12} {'Payment':<22} {'Total':>10}  Created")
    click.echo("-" * (100 + (15 if show_user else 0)))
    for o in orders:
        user_val = f" {o.user_id:<14}" if show_user else ""
        click.echo(
            f"{o.id:<34}{user_val} {o.status:<12} {o.payment_status:<22} {o.total:>10}  {o.created_at}"
        )
