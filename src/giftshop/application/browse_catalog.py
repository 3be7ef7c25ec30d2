"""Application service: Browse Catalog use case (query)."""

from __future__ import annotations

import math

from giftshop.application.dto import CatalogEntryDTO, CatalogPage
from giftshop.domain.exceptions import ValidationError
from giftshop.domain.repository.catalog_repository import CatalogRepository
from giftshop.domain.service.catalog_query import (
    CatalogQuery,
    SortOrder,
    filter_entries,
    sort_entries,
)

DEFAULT_PAGE_SIZE = 12


class BrowseCatalogHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(
        self,
        query: CatalogQuery | None = None,
        sort: SortOrder = SortOrder.FEATURED,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> CatalogPage:
        if page < 1 or page_size < 1:
            raise ValidationError("Page and page size must be positive")

        entries = self._catalog_repo.list_all()
        matches = sort_entries(filter_entries(entries, query or CatalogQuery()), sort)

        total_pages = max(1, math.ceil(len(matches) / page_size))
        start = (page - 1) * page_size
        return CatalogPage(
            entries=[CatalogEntryDTO.from_entry(e) for e in matches[start:start + page_size]],
            page=page,
            total_pages=total_pages,
            total_matches=len(matches),
            # facet values come from the whole catalog, not the filtered set
            brands=sorted({e.brand for e in entries if e.brand}),
            regions=sorted({e.region for e in entries if e.region}),
            categories=sorted({e.category for e in entries if e.category}),
        )
