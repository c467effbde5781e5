"""CLI commands for the shopper's cart."""

from __future__ import annotations

import click

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.clear_cart import ClearCartHandler
from storefront.application.get_cart import GetCartHandler
from storefront.application.remove_from_cart import RemoveFromCartHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.config import StorefrontSettings
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import cart_store, cart_transaction, product_store
from storefront.infrastructure.cli.common import bind_user, display_cart, user_option


@click.command("show")
@user_option
@click.pass_obj
def cart_show(settings: StorefrontSettings, user_id: str | None) -> None:
    """Show the shopper's cart."""
    bind_user(user_id)
    handler = GetCartHandler(cart_store=cart_store(settings))

    try:
        dto = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("add")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default=1, type=int, show_default=True, help="Units to add.")
@click.pass_obj
def cart_add(settings: StorefrontSettings, user_id: str | None, product_id: str, quantity: int) -> None:
    """Add a product to the cart (tops up an existing line)."""
    bind_user(user_id)
    handler = AddToCartHandler(
        transaction=cart_transaction(settings),
        product_store=product_store(settings),
    )

    try:
        dto = handler.handle(user_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {product_id} to cart. Cart total: {dto.total}")


@click.command("update")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity; 0 removes the line.")
@click.pass_obj
def cart_update(settings: StorefrontSettings, user_id: str | None, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line."""
    bind_user(user_id)
    handler = UpdateCartItemHandler(transaction=cart_transaction(settings))

    try:
        dto = handler.handle(user_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Updated {product_id}. Cart total: {dto.total}")


@click.command("remove")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_remove(settings: StorefrontSettings, user_id: str | None, product_id: str) -> None:
    """Remove a product from the cart."""
    bind_user(user_id)
    handler = RemoveFromCartHandler(transaction=cart_transaction(settings))

    try:
        dto = handler.handle(user_id, product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Removed {product_id}. Cart total: {dto.total}")


@click.command("clear")
@user_option
@click.pass_obj
def cart_clear(settings: StorefrontSettings, user_id: str | None) -> None:
    """Empty the cart."""
    bind_user(user_id)
    handler = ClearCartHandler(transaction=cart_transaction(settings))

    try:
        handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Cart cleared.")
