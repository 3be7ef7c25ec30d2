"""Application service: order history queries.

Shoppers see their own orders; administrators can look up any user's
orders or the most recent orders across the store.
"""

from __future__ import annotations

from giftshop.application.access import require_active_user, require_admin
from giftshop.application.dto import OrderDTO
from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.user import CallerContext
from giftshop.domain.repository.order_repository import DEFAULT_LIST_LIMIT, OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def for_caller(self, caller: CallerContext) -> list[OrderDTO]:
        """The caller's own orders, newest first."""
        user_id = require_active_user(caller)
        return [OrderDTO.from_order(o) for o in self._order_repo.list_for_user(user_id)]

    def for_user(self, caller: CallerContext, user_id: str) -> list[OrderDTO]:
        """Any user's orders (administrators only)."""
        require_admin(caller)
        return [OrderDTO.from_order(o) for o in self._order_repo.list_for_user(user_id)]

    def all(self, caller: CallerContext, limit: int = DEFAULT_LIST_LIMIT) -> list[OrderDTO]:
        """Most recent orders store-wide (administrators only)."""
        require_admin(caller)
        if limit <= 0:
            raise ValidationError("Limit must be positive")
        return [OrderDTO.from_order(o) for o in self._order_repo.list_all(limit)]
