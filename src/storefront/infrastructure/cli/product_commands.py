"""CLI commands for the product catalog."""

from __future__ import annotations

import json

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.browse_products import (
    BrowseProductsHandler,
    ListCategoriesHandler,
    ShowProductHandler,
)
from storefront.application.import_products import ImportProductsHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.config import StorefrontSettings
from storefront.domain.exceptions import DomainException
from storefront.domain.model.catalog import DEFAULT_PAGE_SIZE, ProductFilter, SortOrder
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import product_store
from storefront.infrastructure.cli.common import admin_option, display_product


@click.command("list")
@click.option("--category", "categories", multiple=True, help="Filter by category (repeatable).")
@click.option("--min-price", default=None, help="Lowest effective price.")
@click.option("--max-price", default=None, help="Highest effective price.")
@click.option("--in-stock", is_flag=True, default=False, help="Only products with inventory.")
@click.option("--on-sale", is_flag=True, default=False, help="Only discounted products.")
@click.option("--search", default=None, help="Name prefix (case-insensitive).")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice([s.value for s in SortOrder]),
    default=SortOrder.NEWEST.value,
    show_default=True,
)
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--page-size", default=DEFAULT_PAGE_SIZE, type=int, show_default=True)
@click.pass_obj
def product_list(
    settings: StorefrontSettings,
    categories: tuple[str, ...],
    min_price: str | None,
    max_price: str | None,
    in_stock: bool,
    on_sale: bool,
    search: str | None,
    sort_by: str,
    page: int,
    page_size: int,
) -> None:
    """List catalog products."""
    handler = BrowseProductsHandler(product_store=product_store(settings))

    try:
        query = ProductFilter(
            categories=categories,
            min_price=Money.of(min_price) if min_price is not None else None,
            max_price=Money.of(max_price) if max_price is not None else None,
            in_stock=True if in_stock else None,
            on_sale=True if on_sale else None,
            search=search,
            sort_by=SortOrder(sort_by),
            page=page,
            page_size=page_size,
        )
        result = handler.handle(query)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<14} {'Name':<24} {'Category':<14} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 72)
    for p in result.products:
        price = f"{p.effective_price}*" if p.on_sale else p.effective_price
        click.echo(f"{p.id:<14} {p.name:<24} {p.category:<14} {price:>10} {p.inventory:>6}")
    click.echo()
    more = ", more available" if result.has_more else ""
    click.echo(f"Page {result.page} ({len(result.products)} of {result.total}{more})")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(settings: StorefrontSettings, product_id: str) -> None:
    """Show a single product."""
    handler = ShowProductHandler(product_store=product_store(settings))

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_product(dto)


@click.command("categories")
@click.pass_obj
def product_categories(settings: StorefrontSettings) -> None:
    """List the distinct product categories."""
    categories = ListCategoriesHandler(product_store=product_store(settings)).handle()
    if not categories:
        click.echo("No categories found.")
        return
    for category in categories:
        click.echo(category)


@click.command("add")
@admin_option
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--category", default="", help="Category.")
@click.option("--description", default="", help="Description.")
@click.option("--inventory", default=0, type=int, help="Units in stock.")
@click.option("--image", "images", multiple=True, help="Image URL (repeatable).")
@click.option("--sale-price", default=None, help="Discounted price.")
@click.option("--on-sale", is_flag=True, default=False, help="Mark as on sale.")
@click.option("--id", "product_id", default=None, help="Explicit product ID.")
@click.pass_obj
def product_add(
    settings: StorefrontSettings,
    is_admin: bool,
    name: str,
    price: str,
    category: str,
    description: str,
    inventory: int,
    images: tuple[str, ...],
    sale_price: str | None,
    on_sale: bool,
    product_id: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_store=product_store(settings))

    try:
        product = handler.handle(
            is_admin=is_admin,
            name=name,
            price=price,
            category=category,
            description=description,
            inventory=inventory,
            images=list(images),
            sale_price=sale_price,
            on_sale=on_sale,
            product_id=product_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.effective_price}")


@click.command("update")
@admin_option
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New list price (e.g. 29.99).")
@click.option("--sale-price", default=None, help="New sale price.")
@click.option("--clear-sale-price", is_flag=True, default=False, help="Drop the sale price.")
@click.option("--on-sale/--not-on-sale", default=None, help="Toggle the sale flag.")
@click.option("--inventory", default=None, type=int, help="New inventory count.")
@click.pass_obj
def product_update(
    settings: StorefrontSettings,
    is_admin: bool,
    product_id: str,
    price: str | None,
    sale_price: str | None,
    clear_sale_price: bool,
    on_sale: bool | None,
    inventory: int | None,
) -> None:
    """Update a product's pricing or inventory."""
    handler = UpdateProductHandler(product_store=product_store(settings))

    try:
        dto = handler.handle(
            is_admin=is_admin,
            product_id=product_id,
            price=price,
            sale_price=sale_price,
            on_sale=on_sale,
            inventory=inventory,
            clear_sale_price=clear_sale_price,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} updated: {dto.effective_price}, {dto.inventory} in stock")


@click.command("import")
@admin_option
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def product_import(settings: StorefrontSettings, is_admin: bool, source) -> None:
    """Seed the catalog from a JSON file of product records.

    SOURCE holds either a list of records or {"products": [...]}.
    """
    try:
        data = json.load(source)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON: {exc}")
    records = data.get("products", []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise click.ClickException("Expected a list of product records")

    handler = ImportProductsHandler(product_store=product_store(settings))

    try:
        count = handler.handle(is_admin=is_admin, records=records)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Imported {count} products.")
