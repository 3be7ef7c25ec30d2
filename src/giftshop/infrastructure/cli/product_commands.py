"""CLI commands for the gift card catalog."""

from __future__ import annotations

from decimal import Decimal

import click

from giftshop.application.add_product import AddProductHandler
from giftshop.application.browse_catalog import DEFAULT_PAGE_SIZE, BrowseCatalogHandler
from giftshop.application.dto import ProductSpec
from giftshop.application.update_product import DeleteProductHandler, UpdateProductHandler
from giftshop.domain.exceptions import DomainException
from giftshop.domain.service.catalog_query import CatalogQuery, SortOrder
from giftshop.infrastructure.bootstrap import catalog_repository
from giftshop.infrastructure.cli.common import as_option, resolve_caller
from giftshop.infrastructure.config import Settings


@click.command("add")
@as_option
@click.option("--name", required=True, help="Product name.")
@click.option("--brand", required=True)
@click.option("--category", required=True)
@click.option("--region", required=True)
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", type=int, default=0, show_default=True)
@click.option("--discount", type=int, default=None, help="Discount percentage (0-100).")
@click.option("--description", default="")
@click.option("--image-url", default="")
@click.pass_obj
def product_add(
    settings: Settings,
    acting_user: str,
    name: str,
    brand: str,
    category: str,
    region: str,
    price: str,
    stock: int,
    discount: int | None,
    description: str,
    image_url: str,
) -> None:
    """Add a new gift card to the catalog."""
    caller = resolve_caller(settings, acting_user)
    handler = AddProductHandler(catalog_repo=catalog_repository(settings))
    spec = ProductSpec(
        name=name,
        brand=brand,
        category=category,
        region=region,
        price=price,
        currency=settings.currency,
        stock=stock,
        discount=discount,
        description=description,
        image_url=image_url,
    )

    try:
        dto = handler.handle(caller, spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} '{dto.name}' added at {dto.price} ({dto.stock} in stock)")


@click.command("update")
@as_option
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", type=int, default=None, help="New stock level.")
@click.option("--discount", type=int, default=None, help="Discount percentage (0-100).")
@click.option("--name", default=None)
@click.option("--brand", default=None)
@click.option("--category", default=None)
@click.option("--region", default=None)
@click.option("--description", default=None)
@click.option("--image-url", default=None)
@click.pass_obj
def product_update(
    settings: Settings,
    acting_user: str,
    product_id: str,
    price: str | None,
    stock: int | None,
    discount: int | None,
    name: str | None,
    brand: str | None,
    category: str | None,
    region: str | None,
    description: str | None,
    image_url: str | None,
) -> None:
    """Edit a product's details, price or stock."""
    caller = resolve_caller(settings, acting_user)
    handler = UpdateProductHandler(catalog_repo=catalog_repository(settings))

    try:
        dto = handler.handle(
            caller,
            product_id,
            stock=stock,
            price=price,
            discount=discount,
            name=name,
            brand=brand,
            category=category,
            region=region,
            description=description,
            image_url=image_url,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} updated: {dto.effective_price}, {dto.stock} in stock")


@click.command("delete")
@as_option
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(settings: Settings, acting_user: str, product_id: str) -> None:
    """Remove a product from the catalog."""
    caller = resolve_caller(settings, acting_user)
    handler = DeleteProductHandler(catalog_repo=catalog_repository(settings))

    try:
        handler.handle(caller, product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted.")


@click.command("list")
@click.option("--brand", "brands", multiple=True, help="Filter by brand (repeatable).")
@click.option("--region", "regions", multiple=True, help="Filter by region (repeatable).")
@click.option("--category", "categories", multiple=True, help="Filter by category (repeatable).")
@click.option("--min-price", type=float, default=None)
@click.option("--max-price", type=float, default=None)
@click.option("--in-stock", is_flag=True, help="Only products with stock.")
@click.option("--discounted", is_flag=True, help="Only discounted products.")
@click.option("--search", default="", help="Text to look for in name, brand or description.")
@click.option(
    "--sort",
    type=click.Choice([s.value for s in SortOrder]),
    default=SortOrder.FEATURED.value,
    show_default=True,
)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
@click.pass_obj
def product_list(
    settings: Settings,
    brands: tuple[str, ...],
    regions: tuple[str, ...],
    categories: tuple[str, ...],
    min_price: float | None,
    max_price: float | None,
    in_stock: bool,
    discounted: bool,
    search: str,
    sort: str,
    page: int,
    page_size: int,
) -> None:
    """Browse the catalog."""
    handler = BrowseCatalogHandler(catalog_repo=catalog_repository(settings))

    try:
        query = CatalogQuery(
            brands=frozenset(brands),
            regions=frozenset(regions),
            categories=frozenset(categories),
            min_price=None if min_price is None else Decimal(str(min_price)),
            max_price=None if max_price is None else Decimal(str(max_price)),
            in_stock=in_stock,
            has_discount=discounted,
            search=search,
        )
        result = handler.handle(query, SortOrder(sort), page, page_size)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.entries:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Brand':<12} {'Region':<8} {'Price':>12} {'Stock':>6}")
    click.echo("-" * 73)
    for e in result.entries:
        click.echo(
            f"{e.id:<6} {e.name:<24} {e.brand:<12} {e.region:<8} "
            f"{e.effective_price:>12} {e.stock:>6}"
        )
    click.echo(f"Page {result.page}/{result.total_pages} ({result.total_matches} match(es))")
