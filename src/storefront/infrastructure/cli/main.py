import click
import pydantic

from storefront.config import StorefrontSettings
from storefront.infrastructure.bootstrap import load_settings
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.order_commands import (
    order_checkout,
    order_list,
    order_recent,
    order_show,
    order_status,
    order_summary,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_categories,
    product_import,
    product_list,
    product_show,
    product_update,
)
from storefront.infrastructure.cli.webhook_commands import webhook_receive
from storefront.observability import clear_request_context, configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront: carts, checkout and orders."""
    try:
        settings: StorefrontSettings = load_settings()
    except pydantic.ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")

    configure_logging(log_level=settings.log_level, json_format=settings.json_logs)
    clear_request_context()
    ctx.obj = settings


@cli.group()
def product() -> None:
    """Browse and manage the catalog."""


@cli.group()
def cart() -> None:
    """Manage a shopper's cart."""


@cli.group()
def order() -> None:
    """Check out and manage orders."""


@cli.group()
def webhook() -> None:
    """Payment provider notifications."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_categories)
product.add_command(product_import)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_recent)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_summary)
webhook.add_command(webhook_receive)
