from __future__ import annotations

import logging
from dataclasses import dataclass

from vehicle_catalog.domain.catalog_index import CatalogIndex
from vehicle_catalog.domain.criteria import DEFAULT_SORT_ORDER, FilterCriteria, SortOrder
from vehicle_catalog.domain.errors import QueryParseError
from vehicle_catalog.domain.pagination import (
    DEFAULT_PAGE_SIZE,
    PaginationWindow,
    PagingValidationError,
)
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES, CatalogSnapshot, Vehicle
from vehicle_catalog.ports.query_parser import QueryParser
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository
from vehicle_catalog.use_cases.filter_engine import FilterEngine
from vehicle_catalog.use_cases.filter_state import count_active_filters
from vehicle_catalog.use_cases.free_text_search import merge_parsed_query

logger = logging.getLogger(__name__)


MAX_PAGES = 100


@dataclass(frozen=True, slots=True)
class BrowseListingsRequest:
    criteria: FilterCriteria
    sort_order: SortOrder = DEFAULT_SORT_ORDER
    pages: int = 1  # Pages revealed so far (1 + number of advance signals)
    default_category: str = ALL_CATEGORIES
    query_text: str = ""  # Free-text search, folded into the criteria when a parser is configured

    def validate(self) -> None:
        """
        Validate request parameters.

        Raises:
            FilterValidationError: If criteria are malformed
            PagingValidationError: If pages is out of bounds
        """
        self.criteria.validate()
        if self.pages < 1:
            raise PagingValidationError("pages must be >= 1")
        if self.pages > MAX_PAGES:
            raise PagingValidationError(f"pages must be <= {MAX_PAGES}")


@dataclass(frozen=True, slots=True)
class BrowseListingsResponse:
    vehicles: list[Vehicle]
    total_count: int
    revealed_count: int
    has_more: bool
    total_pages: int
    active_filter_count: int
    criteria: FilterCriteria
    sort_order: SortOrder
    query_text: str = ""
    query_degraded: bool = False  # The parser failed; criteria carry no text-derived values


class BrowseListings:
    """
    Stateless rendition of the listings view for request/response clients.

    The client keeps its own criteria and counts its advance signals; each
    request replays them against a fresh pagination window, which yields the
    same prefix a long-lived view would have revealed.

    A free-text query is parsed once per request. There is no debounce or
    supersession here; a parser failure only means no text-derived filters.
    """

    def __init__(
        self,
        vehicle_catalog_repository: VehicleCatalogRepository,
        engine: FilterEngine,
        page_size: int = DEFAULT_PAGE_SIZE,
        query_parser: QueryParser | None = None,
    ) -> None:
        self._repository = vehicle_catalog_repository
        self._engine = engine
        self._page_size = page_size
        self._query_parser = query_parser

    def execute(self, request: BrowseListingsRequest) -> BrowseListingsResponse:
        """
        Execute a listings query.

        Args:
            request: Criteria, sort order and number of revealed pages

        Returns:
            Revealed prefix of the ranked result list plus display metadata

        Raises:
            FilterValidationError: If criteria are malformed
            PagingValidationError: If pages is out of bounds
            CatalogUnavailableError: If the collection cannot be loaded
        """
        request.validate()

        snapshot = self._repository.load()
        criteria, degraded = self._apply_query_text(request, snapshot)
        results = self._engine.compute(snapshot, criteria, request.sort_order)

        window = PaginationWindow(page_size=self._page_size)
        window.bind(results)
        for _ in range(request.pages - 1):
            if not window.advance():
                break

        revealed = list(window.reveal(results))

        return BrowseListingsResponse(
            vehicles=revealed,
            total_count=len(results),
            revealed_count=len(revealed),
            has_more=window.has_more,
            total_pages=window.total_pages,
            active_filter_count=count_active_filters(
                criteria, default_category=request.default_category
            ),
            criteria=criteria,
            sort_order=request.sort_order,
            query_text=request.query_text,
            query_degraded=degraded,
        )

    def _apply_query_text(
        self, request: BrowseListingsRequest, snapshot: CatalogSnapshot
    ) -> tuple[FilterCriteria, bool]:
        if self._query_parser is None or not request.query_text.strip():
            return request.criteria, False

        try:
            parsed = self._query_parser.parse(request.query_text)
        except QueryParseError as exc:
            logger.warning(
                "Query parsing failed, no filters derived",
                extra={"error_code": exc.error_code, "query_length": len(request.query_text)},
            )
            return request.criteria, True

        return merge_parsed_query(request.criteria, parsed, CatalogIndex(snapshot.vehicles)), False
