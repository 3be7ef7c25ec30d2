"""Caller checks shared by the use-case handlers."""

from __future__ import annotations

from giftshop.domain.exceptions import UnauthorizedError
from giftshop.domain.model.order import Order
from giftshop.domain.model.user import CallerContext, UserRole
from giftshop.domain.repository.user_repository import UserRepository


def require_active_user(caller: CallerContext, user_repo: UserRepository | None = None) -> str:
    """Return the caller's user ID if signed in and not blocked.

    When a user repository is given the stored profile is consulted as
    well, so a block applied after sign-in takes effect immediately.
    """
    if not caller.is_authenticated:
        raise UnauthorizedError("You must be signed in")
    if caller.is_blocked:
        raise UnauthorizedError("This account is blocked")
    if user_repo is not None:
        profile = user_repo.get_by_id(caller.user_id)  # type: ignore[arg-type]
        if profile is not None and profile.is_blocked:
            raise UnauthorizedError("This account is blocked")
    return caller.user_id  # type: ignore[return-value]


def require_admin(caller: CallerContext) -> None:
    if not caller.is_admin:
        raise UnauthorizedError("Administrator access required")


def require_super_admin(caller: CallerContext) -> None:
    if not caller.is_admin or caller.role is not UserRole.SUPER_ADMIN:
        raise UnauthorizedError("Only super admins can do this")


def require_owner_or_admin(caller: CallerContext, order: Order) -> None:
    if caller.is_admin:
        return
    require_active_user(caller)
    if order.user_id != caller.user_id:
        raise UnauthorizedError("You can only view your own orders")
