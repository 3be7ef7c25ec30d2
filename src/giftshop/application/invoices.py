"""Application services: invoice download and manual re-send."""

from __future__ import annotations

import logging
from collections.abc import Callable

from giftshop.application.show_order import load_visible_order
from giftshop.domain.model.order import Order
from giftshop.domain.model.user import CallerContext
from giftshop.domain.ports.notification_dispatcher import NotificationDispatcher
from giftshop.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

# (filename, pdf bytes)
InvoiceRenderer = Callable[[Order], tuple[str, bytes]]


class ExportInvoiceHandler:

    def __init__(self, order_repo: OrderRepository, render: InvoiceRenderer) -> None:
        self._order_repo = order_repo
        self._render = render

    def handle(self, caller: CallerContext, order_id: str) -> tuple[str, bytes]:
        order = load_visible_order(self._order_repo, caller, order_id)
        return self._render(order)


class ResendInvoiceHandler:
    """Send the confirmation email again on request.

    Unlike checkout, a failure here is reported to the caller.
    """

    def __init__(self, order_repo: OrderRepository, notifier: NotificationDispatcher) -> None:
        self._order_repo = order_repo
        self._notifier = notifier

    def handle(self, caller: CallerContext, order_id: str) -> str:
        order = load_visible_order(self._order_repo, caller, order_id)
        self._notifier.send_order_confirmation(order)
        logger.info("Invoice for order %s re-sent to %s", order_id, order.customer_email)
        return order.customer_email
