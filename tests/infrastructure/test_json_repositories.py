"""Tests for the JSON-file repositories, against a temporary directory."""

import json
import multiprocessing
import threading
from datetime import timedelta
from pathlib import Path

import pytest

from giftshop.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
    WriteConflictError,
)
from giftshop.domain.model.order import Order, OrderItem, OrderStatus
from giftshop.domain.model.user import UserProfile, UserRole
from giftshop.domain.model.value_objects import CartLine, Money
from giftshop.domain.repository.catalog_repository import StockWrite
from giftshop.domain.service.gift_card_keys import KEY_ALPHABET
from giftshop.domain.service.stock_reservation_service import StockReservationService
from giftshop.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository
from giftshop.infrastructure.persistence.json_order_repository import JsonOrderRepository
from giftshop.infrastructure.persistence.json_user_repository import JsonUserRepository
from tests.fakes import make_address, make_entry, make_payment_method


# Worker processes are spawned, so they start from a clean interpreter
# and share nothing with the test process but the files on disk.

def _reserve_one(path: str) -> str:
    svc = StockReservationService(JsonCatalogRepository(Path(path)))
    try:
        svc.reserve_stock([CartLine.of("A", 1)])
    except InsufficientStockError:
        return "short"
    return "ok"


def _create_one(args: tuple[str, int]) -> str:
    path, index = args
    key = "-".join([KEY_ALPHABET[index] * 4] * 4)
    return JsonOrderRepository(Path(path)).create(_order(keys=(key,)))


def _run_in_processes(func, args: list) -> list:
    with multiprocessing.get_context("spawn").Pool(processes=8) as pool:
        return pool.map(func, args, chunksize=1)


# ── Catalog ──────────────────────────────────────────────────────────────────


class TestJsonCatalogRepository:

    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "data" / "products.json"
        repo = JsonCatalogRepository(path)
        assert json.loads(path.read_text()) == []
        assert repo.list_all() == []
        assert repo.next_id() == "1"

    def test_save_and_reload(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        repo.save(make_entry("1", price="12.50", stock=3, discount=10))

        entry = JsonCatalogRepository(tmp_path / "products.json").get_by_id("1")

        assert entry.price == Money.of("12.50")
        assert entry.stock == 3
        assert entry.discount == 10
        assert entry.version == 1

    def test_next_id_follows_numeric_ids(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        repo.save(make_entry("1"))
        repo.save(make_entry("7"))
        assert repo.next_id() == "8"

    def test_save_moves_version_past_stored(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        repo.save(make_entry("1"))
        stale = repo.get_by_id("1")
        repo.save(repo.get_by_id("1"))
        repo.save(stale)
        assert repo.get_by_id("1").version == 3

    def test_get_many_skips_missing(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        repo.save(make_entry("1"))
        assert list(repo.get_many(["1", "2"])) == ["1"]

    def test_delete(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        repo.save(make_entry("1"))
        assert repo.delete("1") is True
        assert repo.delete("1") is False
        assert repo.get_by_id("1") is None

    def test_commit_stock_checks_versions(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        repo.save(make_entry("1", stock=5))
        repo.save(make_entry("2", stock=5))

        repo.commit_stock({"1": StockWrite(1, 4), "2": StockWrite(1, 3)})
        assert repo.get_by_id("1").stock == 4
        assert repo.get_by_id("2").version == 2

        with pytest.raises(WriteConflictError):
            repo.commit_stock({"1": StockWrite(2, 0), "2": StockWrite(1, 0)})
        # nothing from the rejected commit landed
        assert repo.get_by_id("1").stock == 4
        assert repo.get_by_id("2").stock == 3

    def test_commit_stock_on_deleted_entry_conflicts(self, tmp_path):
        repo = JsonCatalogRepository(tmp_path / "products.json")
        with pytest.raises(WriteConflictError):
            repo.commit_stock({"1": StockWrite(0, 1)})

    def test_malformed_record(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([{"id": "1", "name": "x"}]))
        with pytest.raises(ValidationError, match="Malformed catalog record"):
            JsonCatalogRepository(path).get_by_id("1")

    def test_concurrent_reservations_never_oversell(self, tmp_path):
        path = tmp_path / "products.json"
        JsonCatalogRepository(path).save(make_entry("A", stock=5))
        outcomes = []

        def checkout():
            svc = StockReservationService(JsonCatalogRepository(path))
            try:
                svc.reserve_stock([CartLine.of("A", 1)])
                outcomes.append("ok")
            except InsufficientStockError:
                outcomes.append("short")

        threads = [threading.Thread(target=checkout) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 5
        assert outcomes.count("short") == 15
        assert JsonCatalogRepository(path).get_by_id("A").stock == 0

    def test_reservations_from_separate_processes_never_oversell(self, tmp_path):
        path = tmp_path / "products.json"
        JsonCatalogRepository(path).save(make_entry("A", stock=5))

        outcomes = _run_in_processes(_reserve_one, [str(path)] * 20)

        assert outcomes.count("ok") == 5
        assert outcomes.count("short") == 15
        assert JsonCatalogRepository(path).get_by_id("A").stock == 0
        assert list(tmp_path.glob("*.tmp")) == []


# ── Orders ───────────────────────────────────────────────────────────────────


def _order(user_id: str = "alice", keys=("ABCD-EFGH-JKLM-NPQR",)) -> Order:
    items = [
        OrderItem("1", "Steam 10", "Steam", "Gaming", "US", Money.of("10.00"), key)
        for key in keys
    ]
    return Order.place(user_id, items, make_address(), make_payment_method())


class TestJsonOrderRepository:

    def test_create_assigns_id_and_round_trips(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order(keys=("ABCD-EFGH-JKLM-NPQR", "BCDE-FGHJ-KLMN-PQRS"))

        order_id = repo.create(order)

        assert order.id == order_id
        loaded = JsonOrderRepository(tmp_path / "orders.json").get_by_id(order_id)
        assert loaded.total == Money.of("20.00")
        assert loaded.gift_card_keys == order.gift_card_keys
        assert loaded.shipping_address == order.shipping_address
        assert loaded.placed_at == order.placed_at
        assert loaded.status is OrderStatus.COMPLETED

    def test_stored_record_has_total_and_email(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path).create(_order())
        raw = json.loads(path.read_text())[0]
        assert raw["total"] == "10.00"
        assert raw["currency"] == "USD"
        assert raw["customer_email"] == "alice@example.com"

    def test_create_twice_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.create(order)
        with pytest.raises(ValidationError, match="already exists"):
            repo.create(order)

    def test_listing(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        older = _order("alice", ("AAAA-AAAA-AAAA-AAAA",))
        newer = _order("alice", ("BBBB-BBBB-BBBB-BBBB",))
        newer.placed_at = older.placed_at + timedelta(seconds=1)
        first = repo.create(older)
        second = repo.create(newer)
        repo.create(_order("bob", ("CCCC-CCCC-CCCC-CCCC",)))

        assert [o.id for o in repo.list_for_user("alice")] == [second, first]
        assert len(repo.list_all()) == 3
        assert len(repo.list_all(limit=1)) == 1

    def test_update_status(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order_id = repo.create(_order())
        repo.update_status(order_id, OrderStatus.PENDING)
        assert repo.get_by_id(order_id).status is OrderStatus.PENDING

    def test_update_status_missing(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        with pytest.raises(EntityNotFoundError):
            repo.update_status("nope", OrderStatus.FAILED)

    def test_gift_card_key_exists(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.create(_order())
        assert repo.gift_card_key_exists("ABCD-EFGH-JKLM-NPQR")
        assert not repo.gift_card_key_exists("ZZZZ-ZZZZ-ZZZZ-ZZZZ")

    def test_tampered_total_detected(self, tmp_path):
        path = tmp_path / "orders.json"
        order_id = JsonOrderRepository(path).create(_order())
        records = json.loads(path.read_text())
        records[0]["total"] = "1.00"
        path.write_text(json.dumps(records))

        with pytest.raises(ValidationError, match="does not match its items"):
            JsonOrderRepository(path).get_by_id(order_id)

    def test_creates_from_separate_processes_are_all_kept(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path)

        order_ids = _run_in_processes(_create_one, [(str(path), i) for i in range(20)])

        stored = JsonOrderRepository(path).list_all()
        assert sorted(o.id for o in stored) == sorted(order_ids)
        assert len(set(order_ids)) == 20


# ── Users ────────────────────────────────────────────────────────────────────


class TestJsonUserRepository:

    def test_save_and_update(self, tmp_path):
        repo = JsonUserRepository(tmp_path / "users.json")
        repo.save(UserProfile("alice", "alice@example.com", display_name="Alice"))

        profile = repo.get_by_id("alice")
        profile.role = UserRole.ADMIN
        profile.is_blocked = True
        repo.save(profile)

        reloaded = JsonUserRepository(tmp_path / "users.json")
        assert len(reloaded.list_all()) == 1
        assert reloaded.get_by_id("alice").role is UserRole.ADMIN
        assert reloaded.get_by_id("alice").is_blocked

    def test_missing_user(self, tmp_path):
        assert JsonUserRepository(tmp_path / "users.json").get_by_id("ghost") is None

    def test_unknown_role_is_malformed(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"id": "x", "email": "x@example.com", "role": "owner"}]))
        with pytest.raises(ValidationError):
            JsonUserRepository(path).get_by_id("x")
