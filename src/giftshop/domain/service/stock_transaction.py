"""Optimistic multi-entry transaction over catalog stock.

``run_stock_transaction`` hands a snapshot of the requested entries to
a callback, which returns the new stock per entry (or raises to abort), and commits
the result with a single compare-and-set.  A lost race re-runs the
callback on a fresh snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from giftshop.domain.exceptions import TransactionAbortedError, WriteConflictError
from giftshop.domain.model.catalog import CatalogEntry
from giftshop.domain.repository.catalog_repository import CatalogRepository, StockWrite

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10

Snapshot = dict[str, CatalogEntry]
ReadThenWrite = Callable[[Snapshot], dict[str, int]]


def run_stock_transaction(
    catalog_repo: CatalogRepository,
    entry_ids: list[str],
    read_then_write: ReadThenWrite,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Snapshot:
    """Run *read_then_write* atomically over *entry_ids*.

    Returns the snapshot the successful attempt was computed from.
    Exceptions raised by the callback propagate unchanged and nothing is
    written.  Raises TransactionAbortedError after *max_attempts* conflicts.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        snapshot = catalog_repo.get_many(entry_ids)
        new_stock = read_then_write(snapshot)

        writes = {
            entry_id: StockWrite(
                expected_version=snapshot[entry_id].version, new_stock=stock
            )
            for entry_id, stock in new_stock.items()
        }
        try:
            catalog_repo.commit_stock(writes)
        except WriteConflictError:
            logger.debug(
                "Stock commit conflict on %s (attempt %d/%d)",
                ", ".join(entry_ids), attempt, max_attempts,
            )
            continue
        return snapshot

    raise TransactionAbortedError(
        f"Stock update for {', '.join(entry_ids)} kept conflicting "
        f"after {max_attempts} attempts"
    )
