"""CatalogEntry aggregate: one purchasable gift-card SKU.

Entries are created, edited and deleted by administrators.  The ``stock``
counter is the only field touched by checkout, and only through the
stock transaction in ``giftshop.domain.service.stock_transaction``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.value_objects import Money

_EDITABLE_FIELDS = frozenset(
    {"name", "brand", "category", "region", "price", "discount", "description", "image_url"}
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CatalogEntry:
    """Aggregate root for a gift-card product.

    Invariants:
    - ``stock`` is never negative
    - ``discount`` is either None or a percentage in [0, 100]

    ``version`` is bumped by the repository on every persisted write and
    is what the stock transaction compares against on commit.
    """

    id: str
    name: str
    brand: str
    category: str
    region: str
    price: Money
    stock: int = 0
    discount: int | None = None
    description: str = ""
    image_url: str = ""
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        self._validate()

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        entry_id: str,
        name: str,
        brand: str,
        category: str,
        region: str,
        price: Money,
        stock: int = 0,
        discount: int | None = None,
        description: str = "",
        image_url: str = "",
    ) -> CatalogEntry:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        return CatalogEntry(
            id=entry_id,
            name=name.strip(),
            brand=brand.strip(),
            category=category.strip(),
            region=region.strip(),
            price=price,
            stock=stock,
            discount=discount,
            description=description,
            image_url=image_url,
        )

    # --- Admin mutations ------------------------------------------------------

    def update_details(self, **changes: object) -> None:
        """Apply an administrator edit.

        Only catalog fields may be changed here; ``stock`` has its own
        method and identity/timestamps are never editable.
        """
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            setattr(self, name, value)
        self._validate()
        self.updated_at = _utcnow()

    def set_stock(self, stock: int) -> None:
        if stock < 0:
            raise ValidationError("Stock cannot be negative")
        self.stock = stock
        self.updated_at = _utcnow()

    # --- Computed properties --------------------------------------------------

    @property
    def effective_price(self) -> Money:
        return self.price.apply_discount(self.discount)

    @property
    def currency(self) -> str:
        return self.price.currency

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    # --- Internal helpers -----------------------------------------------------

    def _validate(self) -> None:
        if not isinstance(self.stock, int) or self.stock < 0:
            raise ValidationError(f"Stock must be a non-negative integer, got {self.stock!r}")
        if self.discount is not None and not 0 <= self.discount <= 100:
            raise ValidationError(
                f"Discount must be between 0 and 100, got {self.discount}"
            )
