"""Domain service: Stock Reservation.

Checks and decrements stock for every line of a cart in one atomic
stock transaction, so concurrent checkouts can never oversell a product.

Two phases:
  Pre-check:   drop lines whose product no longer exists (logged);
                fail only if nothing is left.
  Transaction: read current stock for the remaining products, abort the
                whole thing if any is short, otherwise write every
                decrement in the same commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from giftshop.domain.exceptions import (
    InsufficientStockError,
    NoValidItemsError,
    SkuNotFoundError,
)
from giftshop.domain.model.catalog import CatalogEntry
from giftshop.domain.model.value_objects import CartLine
from giftshop.domain.repository.catalog_repository import CatalogRepository
from giftshop.domain.service.stock_transaction import (
    DEFAULT_MAX_ATTEMPTS,
    Snapshot,
    run_stock_transaction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservedLine:
    """A product as it was when its stock was taken, plus the amount taken."""

    entry: CatalogEntry
    quantity: int


@dataclass(frozen=True)
class Reservation:
    lines: list[ReservedLine]
    skipped_sku_ids: list[str] = field(default_factory=list)

    @property
    def quantities(self) -> dict[str, int]:
        return {line.entry.id: line.quantity for line in self.lines}


class StockReservationService:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._max_attempts = max_attempts

    def reserve_stock(self, lines: list[CartLine]) -> Reservation:
        """Take stock for every line, all or nothing.

        Raises NoValidItemsError if no line references an existing product
        and InsufficientStockError naming the first short product.  A
        product deleted while the stock is being taken raises
        SkuNotFoundError.
        """
        requested = self._merge(lines)

        # Phase 1: drop lines for products that no longer exist
        existing = self._catalog_repo.get_many(list(requested))
        skipped = [sku_id for sku_id in requested if sku_id not in existing]
        for sku_id in skipped:
            logger.warning(
                "Product %s not found in catalog; skipping its stock update", sku_id
            )
        valid = {sku_id: qty for sku_id, qty in requested.items() if sku_id in existing}
        if not valid:
            raise NoValidItemsError("No valid products in cart; cannot place order")
        if skipped:
            logger.warning("Filtered out %d unknown product(s) from cart", len(skipped))

        # Phase 2: check and decrement in one transaction
        def decrement(snapshot: Snapshot) -> dict[str, int]:
            new_stock: dict[str, int] = {}
            for sku_id, qty in valid.items():
                entry = snapshot.get(sku_id)
                if entry is None:
                    raise SkuNotFoundError(sku_id)
                if entry.stock < qty:
                    raise InsufficientStockError(sku_id, qty, entry.stock)
                new_stock[sku_id] = entry.stock - qty
            return new_stock

        snapshot = run_stock_transaction(
            self._catalog_repo, list(valid), decrement, self._max_attempts
        )
        logger.info(
            "Reserved stock for %s",
            ", ".join(f"{sku_id} x{qty}" for sku_id, qty in valid.items()),
        )
        return Reservation(
            lines=[ReservedLine(entry=snapshot[sku_id], quantity=qty) for sku_id, qty in valid.items()],
            skipped_sku_ids=skipped,
        )

    def release(self, reservation: Reservation) -> None:
        """Give reserved stock back (compensation for a failed checkout).

        Products deleted since the reservation are ignored.
        """
        quantities = reservation.quantities

        def restock(snapshot: Snapshot) -> dict[str, int]:
            return {
                sku_id: snapshot[sku_id].stock + qty
                for sku_id, qty in quantities.items()
                if sku_id in snapshot
            }

        run_stock_transaction(
            self._catalog_repo, list(quantities), restock, self._max_attempts
        )
        logger.info(
            "Released stock for %s",
            ", ".join(f"{sku_id} x{qty}" for sku_id, qty in quantities.items()),
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _merge(lines: list[CartLine]) -> dict[str, int]:
        merged: dict[str, int] = {}
        for line in lines:
            merged[line.sku_id] = merged.get(line.sku_id, 0) + line.quantity.value
        return merged
