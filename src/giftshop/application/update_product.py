"""Application service: Update / Delete Product use cases (administrators only)."""

from __future__ import annotations

import logging

from giftshop.application.access import require_admin
from giftshop.application.dto import CatalogEntryDTO
from giftshop.domain.exceptions import SkuNotFoundError
from giftshop.domain.model.user import CallerContext
from giftshop.domain.model.value_objects import Money
from giftshop.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class UpdateProductHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(
        self,
        caller: CallerContext,
        product_id: str,
        stock: int | None = None,
        price: str | None = None,
        **details: object,
    ) -> CatalogEntryDTO:
        """Edit a product.

        Price changes do NOT affect existing orders; they captured a
        price snapshot at placement time.
        """
        require_admin(caller)
        entry = self._catalog_repo.get_by_id(product_id)
        if entry is None:
            raise SkuNotFoundError(product_id)

        changes = {name: value for name, value in details.items() if value is not None}
        if price is not None:
            changes["price"] = Money.of(price, entry.currency)
        if changes:
            entry.update_details(**changes)
        if stock is not None:
            entry.set_stock(stock)

        self._catalog_repo.save(entry)
        logger.info("Product %s updated by %s", product_id, caller.user_id)
        return CatalogEntryDTO.from_entry(entry)


class DeleteProductHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(self, caller: CallerContext, product_id: str) -> None:
        """Remove a product; placed orders keep their snapshot."""
        require_admin(caller)
        if not self._catalog_repo.delete(product_id):
            raise SkuNotFoundError(product_id)
        logger.info("Product %s deleted by %s", product_id, caller.user_id)
