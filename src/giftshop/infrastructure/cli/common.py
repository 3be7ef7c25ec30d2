"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import click

from giftshop.domain.model.user import CallerContext
from giftshop.infrastructure.bootstrap import user_repository
from giftshop.infrastructure.config import Settings

as_option = click.option(
    "--as", "acting_user", required=True, help="ID of the user performing the action."
)


def resolve_caller(settings: Settings, user_id: str) -> CallerContext:
    """Turn ``--as <id>`` into a caller context using the stored profile."""
    profile = user_repository(settings).get_by_id(user_id)
    if profile is None:
        raise click.ClickException(f"Unknown user '{user_id}'")
    return CallerContext.for_profile(profile)


def parse_pairs(raw: str) -> list[tuple[str, int]]:
    """Parse 'sku1:3,sku2:1' into (sku, quantity) pairs."""
    pairs: list[tuple[str, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        sku_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{sku_id}'."
            )
        pairs.append((sku_id.strip(), qty))
    return pairs
