"""End-to-end tests for the click CLI against a temporary data directory."""

import json
import logging

import pytest
from click.testing import CliRunner

from giftshop.infrastructure.cli.main import cli

ENV_VARS = (
    "GIFTSHOP_DATA_DIR",
    "STRIPE_SECRET_KEY",
    "SMTP_HOST",
    "MAIL_FROM",
    "GIFTSHOP_LOG_LEVEL",
    "GIFTSHOP_LOG_JSON",
)

CHECKOUT = [
    "--first-name", "Alice",
    "--last-name", "Smith",
    "--email", "alice@example.com",
    "--address", "1 Main St",
    "--city", "Springfield",
    "--zip", "12345",
    "--card-brand", "Visa",
    "--last-four", "4242",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), *args])

    return _run


@pytest.fixture
def shop(run):
    """A super admin, a shopper and one product with five cards in stock."""
    assert run("user", "add", "--id", "boss", "--email", "boss@example.com", "--role", "super_admin").exit_code == 0
    assert run("user", "add", "--id", "alice", "--email", "alice@example.com").exit_code == 0
    result = run(
        "product", "add", "--as", "boss",
        "--name", "Steam 10", "--brand", "Steam", "--category", "Gaming",
        "--region", "US", "--price", "10.00", "--stock", "5",
    )
    assert result.exit_code == 0, result.output
    assert "Product #1 'Steam 10' added at USD 10.00" in result.output
    return run


def _stock(tmp_path, product_id="1"):
    records = json.loads((tmp_path / "products.json").read_text())
    return next(r["stock"] for r in records if r["id"] == product_id)


def _only_order_id(tmp_path):
    (record,) = json.loads((tmp_path / "orders.json").read_text())
    return record["id"]


class TestCheckout:

    def test_place_order(self, shop, tmp_path):
        result = shop("order", "place", "--as", "alice", "--items", "1:2", *CHECKOUT)

        assert result.exit_code == 0, result.output
        assert "USD 20.00" in result.output
        assert "status=completed" in result.output
        assert _stock(tmp_path) == 3
        # no SMTP host configured, so the confirmation lands in the outbox
        assert len(list((tmp_path / "outbox").glob("*.eml"))) == 1

    def test_insufficient_stock(self, shop, tmp_path):
        result = shop("order", "place", "--as", "alice", "--items", "1:6", *CHECKOUT)
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output
        assert _stock(tmp_path) == 5

    def test_payment_without_processor_restocks(self, shop, tmp_path):
        result = shop(
            "order", "place", "--as", "alice", "--items", "1:1", *CHECKOUT,
            "--client-secret", "pi_1_secret_x", "--payment-method-id", "pm_x",
        )
        assert result.exit_code == 1
        assert "Payments are not configured" in result.output
        assert _stock(tmp_path) == 5

    def test_bad_items_format(self, shop):
        result = shop("order", "place", "--as", "alice", "--items", "1x2", *CHECKOUT)
        assert result.exit_code == 2
        assert "ProductID:Quantity" in result.output

    def test_unknown_caller(self, shop):
        result = shop("order", "place", "--as", "mallory", "--items", "1:1", *CHECKOUT)
        assert result.exit_code == 1
        assert "Unknown user 'mallory'" in result.output

    def test_blocked_user_cannot_order(self, shop, tmp_path):
        assert shop("user", "block", "--as", "boss", "--id", "alice").exit_code == 0
        result = shop("order", "place", "--as", "alice", "--items", "1:1", *CHECKOUT)
        assert result.exit_code == 1
        assert "blocked" in result.output
        assert _stock(tmp_path) == 5


class TestOrderQueries:

    def test_list_show_and_invoice(self, shop, tmp_path):
        shop("order", "place", "--as", "alice", "--items", "1:1", *CHECKOUT)
        order_id = _only_order_id(tmp_path)

        listed = shop("order", "list", "--as", "alice")
        assert listed.exit_code == 0
        assert "USD 10.00" in listed.output

        shown = shop("order", "show", "--as", "alice", "--id", order_id)
        assert shown.exit_code == 0
        assert "Alice Smith <alice@example.com>" in shown.output

        out_dir = tmp_path / "invoices"
        invoice = shop("order", "invoice", "--as", "alice", "--id", order_id, "--out", str(out_dir))
        assert invoice.exit_code == 0, invoice.output
        (pdf_path,) = out_dir.glob("Invoice_*.pdf")
        assert pdf_path.read_bytes().startswith(b"%PDF")

    def test_admin_relabels_and_lists_all(self, shop, tmp_path):
        shop("order", "place", "--as", "alice", "--items", "1:1", *CHECKOUT)
        order_id = _only_order_id(tmp_path)

        assert shop("order", "set-status", "--as", "boss", "--id", order_id, "--status", "failed").exit_code == 0
        result = shop("order", "list-all", "--as", "boss")
        assert "failed" in result.output

    def test_client_cannot_list_all(self, shop):
        result = shop("order", "list-all", "--as", "alice")
        assert result.exit_code == 1
        assert "Administrator access required" in result.output

    def test_no_orders(self, shop):
        assert "No orders found." in shop("order", "list", "--as", "alice").output


class TestProductCommands:

    def test_client_cannot_add(self, shop):
        result = shop(
            "product", "add", "--as", "alice", "--name", "X", "--brand", "B",
            "--category", "C", "--region", "US", "--price", "5",
        )
        assert result.exit_code == 1
        assert "Administrator access required" in result.output

    def test_update_and_list(self, shop):
        result = shop("product", "update", "--as", "boss", "--id", "1", "--stock", "9", "--discount", "10")
        assert result.exit_code == 0, result.output
        assert "USD 9.00, 9 in stock" in result.output

        listed = shop("product", "list", "--brand", "Steam", "--sort", "price-low-high")
        assert "Steam 10" in listed.output
        assert "Page 1/1 (1 match(es))" in listed.output

    def test_list_with_no_matches(self, shop):
        assert "No products found." in shop("product", "list", "--brand", "Nope").output

    def test_delete(self, shop):
        assert shop("product", "delete", "--as", "boss", "--id", "1").exit_code == 0
        result = shop("product", "delete", "--as", "boss", "--id", "1")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestUserCommands:

    def test_set_role_and_list(self, shop):
        assert shop("user", "set-role", "--as", "boss", "--id", "alice", "--role", "admin").exit_code == 0
        listed = shop("user", "list", "--as", "alice")
        assert listed.exit_code == 0
        assert "alice@example.com" in listed.output

    def test_duplicate_user(self, shop):
        result = shop("user", "add", "--id", "alice", "--email", "alice@example.com")
        assert result.exit_code == 1
        assert "already exists" in result.output
