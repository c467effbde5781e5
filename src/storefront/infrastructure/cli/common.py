"""Options and formatting shared by the command modules."""

from __future__ import annotations

import click

from storefront.application.dto import CartDTO, OrderDTO, ProductDTO
from storefront.observability import bind_request_context

user_option = click.option(
    "--user",
    "user_id",
    envvar="STOREFRONT_USER",
    default=None,
    help="Shopper identity (or set STOREFRONT_USER).",
)

admin_option = click.option(
    "--admin",
    "is_admin",
    is_flag=True,
    default=False,
    help="Act with admin privileges.",
)


def bind_user(user_id: str | None) -> None:
    if user_id:
        bind_request_context(user_id=user_id)


def display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo(f"Cart for {dto.user_id} is empty.")
        return

    click.echo(f"Cart for {dto.user_id}  ({dto.item_count} items)")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.name or item.product_id:<24} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Cart Total':<31} {dto.total:>20}")


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"Customer: {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.shipping_address:
        click.echo(f"Ship to:  {dto.shipping_address}")
    if dto.payment_id:
        click.echo(f"Payment:  {dto.payment_id}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.name or item.product_id:<24} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Order Total':<31} {dto.total:>20}")


def display_product(dto: ProductDTO) -> None:
    click.echo(f"Product #{dto.id} '{dto.name}'")
    if dto.category:
        click.echo(f"Category:  {dto.category}")
    if dto.on_sale and dto.sale_price is not None:
        click.echo(f"Price:     {dto.effective_price} (was {dto.price})")
    else:
        click.echo(f"Price:     {dto.price}")
    click.echo(f"Inventory: {dto.inventory}{'' if dto.in_stock else ' (out of stock)'}")
    if dto.description:
        click.echo()
        click.echo(dto.description)
