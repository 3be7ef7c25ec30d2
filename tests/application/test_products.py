"""Tests for the catalog administration and browsing use cases."""

import pytest

from giftshop.application.add_product import AddProductHandler
from giftshop.application.browse_catalog import BrowseCatalogHandler
from giftshop.application.dto import ProductSpec
from giftshop.application.update_product import DeleteProductHandler, UpdateProductHandler
from giftshop.domain.exceptions import SkuNotFoundError, UnauthorizedError, ValidationError
from giftshop.domain.model.user import CallerContext, UserRole
from giftshop.domain.service.catalog_query import CatalogQuery, SortOrder
from tests.fakes import FakeCatalogRepository, make_entry

ADMIN = CallerContext(user_id="root", role=UserRole.ADMIN)
CLIENT = CallerContext(user_id="alice")


def _spec(**overrides) -> ProductSpec:
    fields = dict(name="Steam 20", brand="Steam", category="Gaming", region="US", price="20.00", stock=7)
    fields.update(overrides)
    return ProductSpec(**fields)


class TestAddProduct:

    def test_adds_with_next_id(self):
        repo = FakeCatalogRepository([make_entry("1"), make_entry("2")])

        dto = AddProductHandler(repo).handle(ADMIN, _spec())

        assert dto.id == "3"
        assert dto.price == "USD 20.00"
        assert repo.get_by_id("3").stock == 7

    def test_first_product_gets_id_1(self):
        dto = AddProductHandler(FakeCatalogRepository()).handle(ADMIN, _spec())
        assert dto.id == "1"

    def test_client_rejected(self):
        repo = FakeCatalogRepository()
        with pytest.raises(UnauthorizedError):
            AddProductHandler(repo).handle(CLIENT, _spec())
        assert repo.list_all() == []

    def test_invalid_price(self):
        with pytest.raises(ValidationError):
            AddProductHandler(FakeCatalogRepository()).handle(ADMIN, _spec(price="abc"))

    def test_discounted_effective_price(self):
        dto = AddProductHandler(FakeCatalogRepository()).handle(ADMIN, _spec(discount=25))
        assert dto.effective_price == "USD 15.00"


class TestUpdateProduct:

    def test_updates_price_stock_and_details(self):
        repo = FakeCatalogRepository([make_entry("1", price="10.00", stock=1)])

        dto = UpdateProductHandler(repo).handle(
            ADMIN, "1", stock=40, price="12.50", name="Steam 12.50", brand=None
        )

        assert dto.price == "USD 12.50"
        assert dto.stock == 40
        stored = repo.get_by_id("1")
        assert stored.name == "Steam 12.50"
        assert stored.brand == "Steam"

    def test_save_bumps_version(self):
        repo = FakeCatalogRepository([make_entry("1")])
        before = repo.get_by_id("1").version
        UpdateProductHandler(repo).handle(ADMIN, "1", stock=3)
        assert repo.get_by_id("1").version > before

    def test_missing_product(self):
        with pytest.raises(SkuNotFoundError):
            UpdateProductHandler(FakeCatalogRepository()).handle(ADMIN, "9", stock=1)

    def test_negative_stock_rejected(self):
        repo = FakeCatalogRepository([make_entry("1")])
        with pytest.raises(ValidationError):
            UpdateProductHandler(repo).handle(ADMIN, "1", stock=-3)

    def test_client_rejected(self):
        repo = FakeCatalogRepository([make_entry("1")])
        with pytest.raises(UnauthorizedError):
            UpdateProductHandler(repo).handle(CLIENT, "1", stock=0)


class TestDeleteProduct:

    def test_deletes(self):
        repo = FakeCatalogRepository([make_entry("1")])
        DeleteProductHandler(repo).handle(ADMIN, "1")
        assert repo.get_by_id("1") is None

    def test_missing_product(self):
        with pytest.raises(SkuNotFoundError):
            DeleteProductHandler(FakeCatalogRepository()).handle(ADMIN, "1")


class TestBrowseCatalog:

    @pytest.fixture
    def repo(self):
        return FakeCatalogRepository(
            [
                make_entry(str(i), price=f"{i}.00", brand="Steam" if i % 2 else "Xbox", region="US")
                for i in range(1, 26)
            ]
            + [make_entry("99", brand="Amazon", region="EU", stock=0)]
        )

    def test_first_page(self, repo):
        page = BrowseCatalogHandler(repo).handle()
        assert len(page.entries) == 12
        assert page.page == 1
        assert page.total_pages == 3
        assert page.total_matches == 26

    def test_last_page_is_partial(self, repo):
        page = BrowseCatalogHandler(repo).handle(page=3)
        assert len(page.entries) == 2

    def test_page_past_end_is_empty(self, repo):
        assert BrowseCatalogHandler(repo).handle(page=9).entries == []

    def test_facets_come_from_whole_catalog(self, repo):
        page = BrowseCatalogHandler(repo).handle(CatalogQuery(brands=frozenset({"Amazon"})))
        assert [e.id for e in page.entries] == ["99"]
        assert page.brands == ["Amazon", "Steam", "Xbox"]
        assert page.regions == ["EU", "US"]

    def test_sorted_and_filtered(self, repo):
        page = BrowseCatalogHandler(repo).handle(
            CatalogQuery(brands=frozenset({"Steam"}), in_stock=True), SortOrder.PRICE_HIGH_LOW
        )
        assert page.entries[0].id == "25"
        assert page.total_matches == 13

    def test_empty_result_has_one_page(self):
        page = BrowseCatalogHandler(FakeCatalogRepository()).handle()
        assert page.entries == []
        assert page.total_pages == 1

    def test_bad_page(self, repo):
        with pytest.raises(ValidationError):
            BrowseCatalogHandler(repo).handle(page=0)
