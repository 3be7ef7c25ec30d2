"""Order aggregate: the durable record of a completed purchase.

An Order owns its gift-card items.  Items and total are fixed at
placement; only the ``status`` label can change afterwards.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.value_objects import Money, PaymentMethod, ShippingAddress


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class OrderItem:
    """Snapshot of a catalog entry at purchase time plus its redemption key.

    Items produced by checkout always have ``quantity == 1``; one item per
    delivered gift card.
    """

    sku_id: str
    name: str
    brand: str
    category: str
    region: str
    unit_price: Money  # locked at placement time
    gift_card_key: str
    quantity: int = 1
    image_url: str = ""

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValidationError("Item quantity must be positive")
        if not self.gift_card_key:
            raise ValidationError(f"Item '{self.name}' has no gift card key")

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


def generate_order_number() -> str:
    """Human-facing reference; informational, not guaranteed unique."""
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999)}"


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders; it enforces the placement rules.
    The ``__init__`` stays simple so the repository can reconstitute
    persisted orders without re-validating.
    """

    id: str | None
    order_number: str
    user_id: str
    items: tuple[OrderItem, ...]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.COMPLETED
    placed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        user_id: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        status: OrderStatus = OrderStatus.COMPLETED,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not user_id:
            raise ValidationError("Order must belong to a user")
        if not items:
            raise ValidationError("Order must contain at least one item")

        currencies = {item.unit_price.currency for item in items}
        if len(currencies) > 1:
            raise ValidationError(
                f"Order items must share one currency, got {', '.join(sorted(currencies))}"
            )

        keys = [item.gift_card_key for item in items]
        if len(set(keys)) != len(keys):
            raise ValidationError("Gift card keys must be unique within an order")

        return Order(
            id=None,
            order_number=generate_order_number(),
            user_id=user_id,
            items=tuple(items),
            shipping_address=shipping_address,
            payment_method=payment_method,
            status=status,
        )

    # --- State changes --------------------------------------------------------

    def relabel(self, status: OrderStatus) -> None:
        """Overwrite the status label; any status may move to any other."""
        self.status = status

    # --- Computed properties --------------------------------------------------

    @property
    def currency(self) -> str:
        return self.items[0].unit_price.currency if self.items else "USD"

    @property
    def total(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def customer_email(self) -> str:
        return self.shipping_address.email

    @property
    def gift_card_keys(self) -> list[str]:
        return [item.gift_card_key for item in self.items]
