from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from vehicle_catalog.domain.catalog_index import CatalogIndex, ChoiceSets
from vehicle_catalog.domain.criteria import DEFAULT_SORT_ORDER, FilterCriteria, SortOrder
from vehicle_catalog.domain.filter_changes import FilterChange
from vehicle_catalog.domain.pagination import DEFAULT_PAGE_SIZE, PaginationWindow, ResultList
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES, CatalogSnapshot, Vehicle
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository
from vehicle_catalog.use_cases.filter_engine import FilterEngine
from vehicle_catalog.use_cases.filter_state import FilterStateSynchronizer
from vehicle_catalog.use_cases.free_text_search import FreeTextSearch, merge_parsed_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ListingsPage:
    """What the renderer needs for one frame of the listings view."""

    vehicles: Sequence[Vehicle]
    total_count: int
    revealed_count: int
    has_more: bool
    total_pages: int
    active_filter_count: int
    criteria: FilterCriteria
    sort_order: SortOrder
    query_text: str = ""


class ListingsView:
    """
    State of one listings view: applied criteria, sort order, result list
    and pagination window.

    Every criteria or sort change recomputes the result list synchronously
    and puts the window back to one page. The collection is loaded from the
    repository on refresh() only; the snapshot is then reused for every
    filter change.
    """

    def __init__(
        self,
        repository: VehicleCatalogRepository,
        engine: FilterEngine,
        default_category: str = ALL_CATEGORIES,
        page_size: int = DEFAULT_PAGE_SIZE,
        free_text: FreeTextSearch | None = None,
        wishlist_ids: frozenset[int] | None = None,
    ) -> None:
        self._repository = repository
        self._engine = engine
        self._free_text = free_text
        self._wishlist_ids = wishlist_ids
        self._filters = FilterStateSynchronizer(
            default_category=default_category,
            wishlist_mode=wishlist_ids is not None,
        )
        self._window = PaginationWindow(page_size=page_size)
        self._sort_order = DEFAULT_SORT_ORDER
        self._snapshot = CatalogSnapshot(vehicles=(), version="empty")
        self._index = CatalogIndex(())
        self._results = ResultList(vehicles=(), query_key=None)
        self.refresh()

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def refresh(self) -> ListingsPage:
        """Reload the collection. Keeps the reveal position for unchanged criteria."""
        snapshot = self._repository.load()
        if self._wishlist_ids is not None:
            snapshot = snapshot.restricted_to(self._wishlist_ids)
        self._snapshot = snapshot
        self._index = CatalogIndex(snapshot.vehicles)
        return self._recompute()

    @property
    def filters(self) -> FilterStateSynchronizer:
        return self._filters

    @property
    def index(self) -> CatalogIndex:
        return self._index

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    # ------------------------------------------------------------------
    # Immediate filter changes
    # ------------------------------------------------------------------

    def change_filter(self, change: FilterChange) -> ListingsPage:
        self._filters.change(change)
        return self._recompute()

    def set_sort_order(self, sort_order: SortOrder) -> ListingsPage:
        self._sort_order = sort_order
        return self._recompute()

    def set_auto_region(self, state: str) -> ListingsPage:
        self._filters.set_auto_region(state)
        return self._recompute()

    # ------------------------------------------------------------------
    # Edit-before-apply session
    # ------------------------------------------------------------------

    def open_filters(self) -> FilterCriteria:
        return self._filters.open_draft()

    def edit_draft(self, change: FilterChange) -> FilterCriteria:
        return self._filters.edit_draft(change)

    def draft_choice_sets(self) -> ChoiceSets:
        draft = self._filters.draft or self._filters.applied
        return self._index.choice_sets(draft)

    def cancel_filters(self) -> ListingsPage:
        self._filters.cancel_draft()
        return self.page()

    def reset_draft(self) -> FilterCriteria:
        return self._filters.reset_draft()

    def apply_filters(self) -> ListingsPage:
        self._filters.apply_draft(self._index)
        self._window.reset()
        return self._recompute()

    def reset_filters(self) -> ListingsPage:
        """Full reset: criteria to the view defaults, default sort, no query text."""
        self._filters.reset()
        self._sort_order = DEFAULT_SORT_ORDER
        if self._free_text is not None:
            self._free_text.clear()
        self._window.reset()
        return self._recompute()

    # ------------------------------------------------------------------
    # Free-text search
    # ------------------------------------------------------------------

    async def search_text(self, text: str) -> ListingsPage | None:
        """
        Run a free-text query through the parser and merge what it found.

        Returns None when a newer query superseded this one.
        """
        if self._free_text is None:
            return self.page()

        outcome = await self._free_text.submit(text)
        if outcome is None:
            return None

        if not outcome.parsed.is_empty:
            merged = merge_parsed_query(self._filters.applied, outcome.parsed, self._index)
            self._filters.replace_applied(merged)
        return self._recompute()

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def advance(self) -> ListingsPage:
        """Visibility signal from the end of the rendered list."""
        self._window.advance()
        return self.page()

    def choice_sets(self) -> ChoiceSets:
        return self._index.choice_sets(self._filters.applied)

    def page(self) -> ListingsPage:
        revealed = self._window.reveal(self._results)
        return ListingsPage(
            vehicles=revealed,
            total_count=len(self._results),
            revealed_count=len(revealed),
            has_more=self._window.has_more,
            total_pages=self._window.total_pages,
            active_filter_count=self._filters.active_filter_count(),
            criteria=self._filters.applied,
            sort_order=self._sort_order,
            query_text=self._free_text.query_text if self._free_text is not None else "",
        )

    def _recompute(self) -> ListingsPage:
        self._results = self._engine.compute(
            self._snapshot, self._filters.applied, self._sort_order
        )
        self._window.bind(self._results)
        return self.page()
