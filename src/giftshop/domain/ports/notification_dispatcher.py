"""Port for delivering order confirmations (email + invoice)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from giftshop.domain.model.order import Order


class NotificationDispatcher(ABC):

    @abstractmethod
    def send_order_confirmation(self, order: Order) -> None:
        """Deliver the confirmation for *order* to its customer email.

        Raises NotificationFailedError on delivery failure.
        """
