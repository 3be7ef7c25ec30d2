"""Application service: Add Product use case (administrators only)."""

from __future__ import annotations

import logging

from giftshop.application.access import require_admin
from giftshop.application.dto import CatalogEntryDTO, ProductSpec
from giftshop.domain.model.catalog import CatalogEntry
from giftshop.domain.model.user import CallerContext
from giftshop.domain.model.value_objects import Money
from giftshop.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(self, caller: CallerContext, spec: ProductSpec) -> CatalogEntryDTO:
        """Add a new gift card to the catalog."""
        require_admin(caller)

        entry = CatalogEntry.create(
            entry_id=self._catalog_repo.next_id(),
            name=spec.name,
            brand=spec.brand,
            category=spec.category,
            region=spec.region,
            price=Money.of(spec.price, spec.currency),
            stock=spec.stock,
            discount=spec.discount,
            description=spec.description,
            image_url=spec.image_url,
        )
        self._catalog_repo.save(entry)
        logger.info("Product %s (%s) added by %s", entry.id, entry.name, caller.user_id)
        return CatalogEntryDTO.from_entry(entry)
