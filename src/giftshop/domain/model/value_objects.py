"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from giftshop.domain.exceptions import ValidationError

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if not self.currency or len(self.currency) != 3:
            raise ValidationError(f"Invalid currency code: {self.currency!r}")

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def apply_discount(self, percent: int | None) -> Money:
        """Return the amount reduced by *percent*, rounded to cents."""
        if not percent:
            return self
        if not 0 < percent <= 100:
            raise ValidationError(f"Discount must be between 0 and 100, got {percent}")
        discounted = self.amount * (Decimal(100 - percent) / Decimal(100))
        return Money(discounted.quantize(_CENT, rounding=ROUND_HALF_UP), self.currency)

    def to_minor_units(self) -> int:
        """Amount in cents, as payment processors expect it."""
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency.upper())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ShippingAddress:
    """Billing/contact details captured at checkout."""

    first_name: str
    last_name: str
    email: str
    address: str
    city: str
    zip_code: str
    state: str = ""

    def __post_init__(self) -> None:
        if not self.email or "@" not in self.email:
            raise ValidationError(f"A valid email is required, got {self.email!r}")
        if not self.first_name.strip() or not self.last_name.strip():
            raise ValidationError("First and last name are required")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


_LAST_FOUR = re.compile(r"^\d{4}$")


@dataclass(frozen=True)
class PaymentMethod:
    """Card brand and last four digits only; raw card data never lands here."""

    card_brand: str
    last_four: str

    def __post_init__(self) -> None:
        if not _LAST_FOUR.match(self.last_four):
            raise ValidationError(
                f"Card last four must be exactly 4 digits, got {self.last_four!r}"
            )

    def __str__(self) -> str:
        return f"{self.card_brand} **** {self.last_four}"


@dataclass(frozen=True)
class CartLine:
    """A product reference plus requested quantity, as held by the shopper."""

    sku_id: str
    quantity: Quantity

    @staticmethod
    def of(sku_id: str, quantity: int) -> CartLine:
        if not sku_id or not sku_id.strip():
            raise ValidationError("Cart line needs a product ID")
        return CartLine(sku_id=sku_id.strip(), quantity=Quantity(quantity))
