"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.value_objects import (
    CartLine,
    Money,
    PaymentMethod,
    Quantity,
    ShippingAddress,
)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_upper_cases_currency(self):
        assert Money.of("5", "eur").currency == "EUR"

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_bad_currency_rejected(self):
        with pytest.raises(ValidationError, match="currency"):
            Money(Decimal("1"), "DOLLARS")

    def test_addition_and_multiplication(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of("20")) == "USD 20.00"
        assert str(Money.of("9.5", "EUR")) == "EUR 9.50"

    def test_apply_discount_rounds_to_cents(self):
        assert Money.of("9.99").apply_discount(15) == Money.of("8.49")
        assert Money.of("10").apply_discount(None) == Money.of("10")
        assert Money.of("10").apply_discount(100) == Money.of("0")

    def test_apply_discount_out_of_range(self):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Money.of("10").apply_discount(120)

    def test_to_minor_units(self):
        assert Money.of("20.00").to_minor_units() == 2000
        assert Money.of("0.5").to_minor_units() == 50


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_rejected(self, bad):
        with pytest.raises(ValidationError, match="positive"):
            Quantity(bad)

    @pytest.mark.parametrize("bad", [1.5, "2", True])
    def test_non_integer_rejected(self, bad):
        with pytest.raises(ValidationError, match="integer"):
            Quantity(bad)


# ── Checkout details ─────────────────────────────────────────────────────────


class TestShippingAddress:

    def test_full_name(self):
        address = ShippingAddress("Ada", "Lovelace", "ada@example.com", "1 St", "London", "N1")
        assert address.full_name == "Ada Lovelace"

    def test_email_required(self):
        with pytest.raises(ValidationError, match="email"):
            ShippingAddress("Ada", "Lovelace", "not-an-email", "1 St", "London", "N1")

    def test_names_required(self):
        with pytest.raises(ValidationError, match="name"):
            ShippingAddress(" ", "Lovelace", "ada@example.com", "1 St", "London", "N1")


class TestPaymentMethod:

    def test_str_masks_card(self):
        assert str(PaymentMethod("Visa", "4242")) == "Visa **** 4242"

    @pytest.mark.parametrize("bad", ["424", "42424", "abcd"])
    def test_last_four_must_be_four_digits(self, bad):
        with pytest.raises(ValidationError, match="4 digits"):
            PaymentMethod("Visa", bad)


class TestCartLine:

    def test_of_strips_id(self):
        line = CartLine.of(" 7 ", 2)
        assert line.sku_id == "7"
        assert line.quantity == Quantity(2)

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError, match="product ID"):
            CartLine.of("", 1)

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            CartLine.of("1", 0)
