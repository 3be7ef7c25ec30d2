"""Abstract repository for the Order aggregate.

Orders are created once and never deleted; the only mutation after
creation is the administrator status relabel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from giftshop.domain.model.order import Order, OrderStatus

DEFAULT_LIST_LIMIT = 100


class OrderRepository(ABC):

    @abstractmethod
    def create(self, order: Order) -> str:
        """Insert a new order, assign its ID and return it."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def list_all(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Order]:
        """Return up to *limit* orders across all users, newest first."""

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Overwrite an order's status.

        Raises EntityNotFoundError if the order does not exist.
        """

    @abstractmethod
    def gift_card_key_exists(self, key: str) -> bool:
        """True if any stored order already carries *key*."""
