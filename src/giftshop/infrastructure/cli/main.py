from dataclasses import replace
from pathlib import Path

import click

from giftshop.infrastructure.cli.order_commands import (
    order_create_intent,
    order_invoice,
    order_list,
    order_list_all,
    order_place,
    order_resend_invoice,
    order_set_status,
    order_show,
)
from giftshop.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_update,
)
from giftshop.infrastructure.cli.user_commands import (
    user_add,
    user_block,
    user_list,
    user_set_role,
    user_unblock,
)
from giftshop.infrastructure.config import Settings
from giftshop.infrastructure.logging_config import setup_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="GIFTSHOP_DATA_DIR",
    default=None,
    help="Directory holding the JSON data files.",
)
@click.option("--log-level", envvar="GIFTSHOP_LOG_LEVEL", default=None, help="Logging level.")
@click.option("--log-json/--no-log-json", envvar="GIFTSHOP_LOG_JSON", default=None, help="Log as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, log_level: str | None, log_json: bool | None) -> None:
    """giftshop: gift card storefront back office"""
    settings = Settings.from_env()
    if data_dir is not None:
        settings = replace(settings, data_dir=data_dir)
    if log_level:
        settings = replace(settings, log_level=log_level.upper())
    if log_json is not None:
        settings = replace(settings, log_json=log_json)
    setup_logging(settings.log_level, json=settings.log_json)
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Place and manage orders."""


@cli.group()
def product() -> None:
    """Manage the gift card catalog."""


@cli.group()
def user() -> None:
    """Manage user profiles."""


# Register subcommands
order.add_command(order_create_intent)
order.add_command(order_invoice)
order.add_command(order_list)
order.add_command(order_list_all)
order.add_command(order_place)
order.add_command(order_resend_invoice)
order.add_command(order_set_status)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_update)
user.add_command(user_add)
user.add_command(user_block)
user.add_command(user_list)
user.add_command(user_set_role)
user.add_command(user_unblock)
