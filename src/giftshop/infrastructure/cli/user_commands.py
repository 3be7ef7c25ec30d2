"""CLI commands for user profiles."""

from __future__ import annotations

import click

from giftshop.application.access import require_admin
from giftshop.application.dto import UserDTO
from giftshop.application.manage_users import (
    ChangeUserRoleHandler,
    RegisterUserHandler,
    SetUserBlockedHandler,
)
from giftshop.domain.exceptions import DomainException
from giftshop.domain.model.user import UserRole
from giftshop.infrastructure.bootstrap import user_repository
from giftshop.infrastructure.cli.common import as_option, resolve_caller
from giftshop.infrastructure.config import Settings


@click.command("add")
@click.option("--id", "user_id", required=True, help="User ID from the identity provider.")
@click.option("--email", required=True)
@click.option("--name", "display_name", default="")
@click.option(
    "--role",
    type=click.Choice([r.value for r in UserRole]),
    default=UserRole.CLIENT.value,
    show_default=True,
)
@click.pass_obj
def user_add(settings: Settings, user_id: str, email: str, display_name: str, role: str) -> None:
    """Register a user profile."""
    handler = RegisterUserHandler(user_repo=user_repository(settings))

    try:
        dto = handler.handle(user_id, email, display_name, UserRole(role))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {dto.id} <{dto.email}> added as {dto.role}")


def _set_blocked(settings: Settings, acting_user: str, user_id: str, blocked: bool) -> None:
    caller = resolve_caller(settings, acting_user)
    handler = SetUserBlockedHandler(user_repo=user_repository(settings))

    try:
        handler.handle(caller, user_id, blocked)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {user_id} {'blocked' if blocked else 'unblocked'}.")


@click.command("block")
@as_option
@click.option("--id", "user_id", required=True, help="User to block.")
@click.pass_obj
def user_block(settings: Settings, acting_user: str, user_id: str) -> None:
    """Block a user from placing orders."""
    _set_blocked(settings, acting_user, user_id, True)


@click.command("unblock")
@as_option
@click.option("--id", "user_id", required=True, help="User to unblock.")
@click.pass_obj
def user_unblock(settings: Settings, acting_user: str, user_id: str) -> None:
    """Lift a block."""
    _set_blocked(settings, acting_user, user_id, False)


@click.command("set-role")
@as_option
@click.option("--id", "user_id", required=True, help="User whose role changes.")
@click.option("--role", required=True, type=click.Choice([r.value for r in UserRole]))
@click.pass_obj
def user_set_role(settings: Settings, acting_user: str, user_id: str, role: str) -> None:
    """Change a user's role (super admins only)."""
    caller = resolve_caller(settings, acting_user)
    handler = ChangeUserRoleHandler(user_repo=user_repository(settings))

    try:
        dto = handler.handle(caller, user_id, role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {dto.id} is now {dto.role}.")


@click.command("list")
@as_option
@click.pass_obj
def user_list(settings: Settings, acting_user: str) -> None:
    """List user profiles (admins only)."""
    caller = resolve_caller(settings, acting_user)

    try:
        require_admin(caller)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    dtos = [UserDTO.from_profile(p) for p in user_repository(settings).list_all()]
    if not dtos:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<16} {'Email':<30} {'Role':<12} {'Blocked':>7}")
    click.echo("-" * 68)
    for u in dtos:
        click.echo(f"{u.id:<16} {u.email:<30} {u.role:<12} {'yes' if u.is_blocked else 'no':>7}")
