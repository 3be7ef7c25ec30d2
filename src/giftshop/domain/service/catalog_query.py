"""Catalog filtering and sorting for the storefront listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from giftshop.domain.exceptions import ValidationError
from giftshop.domain.model.catalog import CatalogEntry


class SortOrder(Enum):
    FEATURED = "featured"
    PRICE_LOW_HIGH = "price-low-high"
    PRICE_HIGH_LOW = "price-high-low"
    NAME_A_Z = "name-a-z"
    NAME_Z_A = "name-z-a"
    NEWEST = "newest"
    DISCOUNT = "discount"


@dataclass(frozen=True)
class CatalogQuery:
    """Active filters; empty collections and None bounds mean "any"."""

    brands: frozenset[str] = field(default_factory=frozenset)
    regions: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    in_stock: bool = False
    has_discount: bool = False
    search: str = ""

    def __post_init__(self) -> None:
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValidationError(
                f"Minimum price {self.min_price} is above maximum {self.max_price}"
            )

    def matches(self, entry: CatalogEntry) -> bool:
        if self.brands and entry.brand not in self.brands:
            return False
        if self.regions and entry.region not in self.regions:
            return False
        if self.categories and entry.category not in self.categories:
            return False

        # Price bounds apply to what the shopper actually pays
        price = entry.effective_price.amount
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False

        if self.in_stock and not entry.in_stock:
            return False
        if self.has_discount and not entry.discount:
            return False

        if self.search:
            needle = self.search.lower()
            haystack = (entry.name, entry.brand, entry.category, entry.description)
            if not any(needle in text.lower() for text in haystack):
                return False
        return True


def filter_entries(entries: list[CatalogEntry], query: CatalogQuery) -> list[CatalogEntry]:
    return [entry for entry in entries if query.matches(entry)]


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def sort_entries(entries: list[CatalogEntry], order: SortOrder) -> list[CatalogEntry]:
    """Return a sorted copy; FEATURED keeps the stored order."""
    if order is SortOrder.PRICE_LOW_HIGH:
        return sorted(entries, key=lambda e: e.effective_price.amount)
    if order is SortOrder.PRICE_HIGH_LOW:
        return sorted(entries, key=lambda e: e.effective_price.amount, reverse=True)
    if order is SortOrder.NAME_A_Z:
        return sorted(entries, key=lambda e: e.name.casefold())
    if order is SortOrder.NAME_Z_A:
        return sorted(entries, key=lambda e: e.name.casefold(), reverse=True)
    if order is SortOrder.NEWEST:
        return sorted(entries, key=lambda e: e.created_at or _EPOCH, reverse=True)
    if order is SortOrder.DISCOUNT:
        return sorted(entries, key=lambda e: e.discount or 0, reverse=True)
    return list(entries)
