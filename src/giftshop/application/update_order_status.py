"""Application service: relabel an order's status (administrators only).

There is no transition graph: support staff may move an order between
pending, completed and failed freely.
"""

from __future__ import annotations

import logging

from giftshop.application.access import require_admin
from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.order import OrderStatus
from giftshop.domain.model.user import CallerContext
from giftshop.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, caller: CallerContext, order_id: str, status: str) -> None:
        require_admin(caller)
        try:
            new_status = OrderStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Unknown status '{status}' (expected one of: {allowed})")

        self._order_repo.update_status(order_id, new_status)
        logger.info("Order %s status set to %s by %s", order_id, new_status.value, caller.user_id)
