"""Abstract repository for the CatalogEntry aggregate.

Besides plain reads and administrator writes, the store must offer one
atomic primitive: ``commit_stock``, a compare-and-set over several
entries at once.  Stock reservation builds its transactions on top of it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from giftshop.domain.model.catalog import CatalogEntry


@dataclass(frozen=True)
class StockWrite:
    """New stock for one entry, valid only if the entry is still at ``expected_version``."""

    expected_version: int
    new_stock: int


class CatalogRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate an ID for a new catalog entry."""

    @abstractmethod
    def get_by_id(self, entry_id: str) -> CatalogEntry | None:
        """Return an entry by its ID, or None if not found."""

    @abstractmethod
    def get_many(self, entry_ids: list[str]) -> dict[str, CatalogEntry]:
        """Return a consistent snapshot of the existing entries among *entry_ids*."""

    @abstractmethod
    def list_all(self) -> list[CatalogEntry]:
        """Return every entry in the catalog."""

    @abstractmethod
    def save(self, entry: CatalogEntry) -> None:
        """Persist a new or updated entry and bump its version."""

    @abstractmethod
    def delete(self, entry_id: str) -> bool:
        """Remove an entry; return False if it did not exist."""

    @abstractmethod
    def commit_stock(self, writes: dict[str, StockWrite]) -> None:
        """Atomically apply every write, or none of them.

        Raises WriteConflictError if any entry is missing or no longer at
        its expected version.
        """
