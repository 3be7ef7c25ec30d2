"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from giftshop.domain.exceptions import ValidationError, WriteConflictError
from giftshop.domain.model.catalog import CatalogEntry
from giftshop.domain.model.value_objects import Money
from giftshop.domain.repository.catalog_repository import CatalogRepository, StockWrite
from giftshop.infrastructure.persistence.json_file import (
    ensure_file,
    load_raw,
    lock_for,
    persist_raw,
)


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        ensure_file(file_path, self._lock)

    # --- CatalogRepository interface ------------------------------------------

    def next_id(self) -> str:
        with self._lock:
            numeric = [int(r["id"]) for r in load_raw(self._file_path) if str(r["id"]).isdigit()]
        return str(max(numeric, default=0) + 1)

    def get_by_id(self, entry_id: str) -> CatalogEntry | None:
        for raw in load_raw(self._file_path):
            if raw["id"] == entry_id:
                return self._to_domain(raw)
        return None

    def get_many(self, entry_ids: list[str]) -> dict[str, CatalogEntry]:
        wanted = set(entry_ids)
        with self._lock:
            records = load_raw(self._file_path)
        return {
            raw["id"]: self._to_domain(raw) for raw in records if raw["id"] in wanted
        }

    def list_all(self) -> list[CatalogEntry]:
        return [self._to_domain(raw) for raw in load_raw(self._file_path)]

    def save(self, entry: CatalogEntry) -> None:
        with self._lock:
            records = load_raw(self._file_path)

            # Upsert: replace if exists, otherwise append.  The version always
            # moves past the stored one so in-flight stock transactions conflict.
            for i, raw in enumerate(records):
                if raw["id"] == entry.id:
                    entry.version = max(entry.version, raw.get("version", 0)) + 1
                    records[i] = self._to_raw(entry)
                    break
            else:
                entry.version += 1
                records.append(self._to_raw(entry))
            persist_raw(self._file_path, records)

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            records = load_raw(self._file_path)
            kept = [raw for raw in records if raw["id"] != entry_id]
            if len(kept) == len(records):
                return False
            persist_raw(self._file_path, kept)
            return True

    def commit_stock(self, writes: dict[str, StockWrite]) -> None:
        with self._lock:
            records = load_raw(self._file_path)
            by_id = {raw["id"]: raw for raw in records}

            # Verify every version before touching anything
            for entry_id, write in writes.items():
                raw = by_id.get(entry_id)
                if raw is None or raw.get("version", 0) != write.expected_version:
                    raise WriteConflictError(f"Product '{entry_id}' changed concurrently")
                if write.new_stock < 0:
                    raise ValidationError(f"Stock for '{entry_id}' cannot go negative")

            now = datetime.now(timezone.utc).isoformat()
            for entry_id, write in writes.items():
                raw = by_id[entry_id]
                raw["stock"] = write.new_stock
                raw["version"] = write.expected_version + 1
                raw["updated_at"] = now
            persist_raw(self._file_path, records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: CatalogEntry) -> dict:
        return {
            "id": entry.id,
            "name": entry.name,
            "brand": entry.brand,
            "category": entry.category,
            "region": entry.region,
            "price": str(entry.price.amount),
            "currency": entry.price.currency,
            "stock": entry.stock,
            "discount": entry.discount,
            "description": entry.description,
            "image_url": entry.image_url,
            "created_at": entry.created_at.isoformat(),
            "updated_at": entry.updated_at.isoformat(),
            "version": entry.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> CatalogEntry:
        try:
            return CatalogEntry(
                id=raw["id"],
                name=raw["name"],
                brand=raw.get("brand", ""),
                category=raw.get("category", ""),
                region=raw.get("region", ""),
                price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
                stock=raw.get("stock", 0),
                discount=raw.get("discount"),
                description=raw.get("description", ""),
                image_url=raw.get("image_url", ""),
                created_at=datetime.fromisoformat(raw["created_at"]),
                updated_at=datetime.fromisoformat(raw["updated_at"]),
                version=raw.get("version", 0),
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise ValidationError(f"Malformed catalog record {raw.get('id')!r}: {exc}") from exc
