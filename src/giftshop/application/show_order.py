"""Application service: Show Order use case (query)."""

from __future__ import annotations

from giftshop.application.access import require_owner_or_admin
from giftshop.application.dto import OrderDTO
from giftshop.domain.exceptions import EntityNotFoundError
from giftshop.domain.model.order import Order
from giftshop.domain.model.user import CallerContext
from giftshop.domain.repository.order_repository import OrderRepository


def load_visible_order(
    order_repo: OrderRepository, caller: CallerContext, order_id: str
) -> Order:
    """Fetch an order the caller is allowed to see."""
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order {order_id} not found")
    require_owner_or_admin(caller, order)
    return order


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, caller: CallerContext, order_id: str) -> OrderDTO:
        return OrderDTO.from_order(load_visible_order(self._order_repo, caller, order_id))
