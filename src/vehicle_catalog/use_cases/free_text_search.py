from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from vehicle_catalog.domain.catalog_index import CatalogIndex, contains_choice
from vehicle_catalog.domain.criteria import MAX_PRICE, MIN_PRICE, FilterCriteria, NumericRange
from vehicle_catalog.domain.errors import QueryParseError
from vehicle_catalog.domain.filter_changes import MakeChanged, ModelChanged, apply_change
from vehicle_catalog.ports.query_parser import ParsedQuery, QueryParser

logger = logging.getLogger(__name__)


DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class FreeTextSearchResult:
    query_text: str
    parsed: ParsedQuery
    degraded: bool = False  # True when the parser failed and nothing was derived


class FreeTextSearch:
    """
    Debounced, last-write-wins access to the external query parser.

    Each submit() takes a sequence number. After the debounce delay and
    again after the parser answers, a submission that is no longer the
    latest returns None and its answer is dropped. Parser failures and
    timeouts degrade to an empty ParsedQuery; they never raise.
    """

    def __init__(
        self,
        parser: QueryParser,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._parser = parser
        self._debounce_seconds = debounce_seconds
        self._timeout_seconds = timeout_seconds
        self._latest_sequence = 0
        self._query_text = ""

    @property
    def query_text(self) -> str:
        """Literal text of the latest submission, kept for display."""
        return self._query_text

    def clear(self) -> None:
        self._latest_sequence += 1
        self._query_text = ""

    async def submit(self, text: str) -> FreeTextSearchResult | None:
        self._latest_sequence += 1
        sequence = self._latest_sequence
        self._query_text = text

        if not text.strip():
            return FreeTextSearchResult(query_text=text, parsed=ParsedQuery.empty())

        await asyncio.sleep(self._debounce_seconds)
        if sequence != self._latest_sequence:
            logger.debug("Query superseded during debounce", extra={"sequence": sequence})
            return None

        degraded = False
        try:
            parsed = await asyncio.wait_for(
                asyncio.to_thread(self._parser.parse, text),
                timeout=self._timeout_seconds,
            )
        except (QueryParseError, asyncio.TimeoutError) as exc:
            logger.warning(
                "Query parsing failed, no filters derived",
                extra={"error_type": type(exc).__name__, "query_length": len(text)},
            )
            parsed = ParsedQuery.empty()
            degraded = True

        if sequence != self._latest_sequence:
            logger.debug("Stale parse result discarded", extra={"sequence": sequence})
            return None

        return FreeTextSearchResult(query_text=text, parsed=parsed, degraded=degraded)


def merge_parsed_query(
    criteria: FilterCriteria, parsed: ParsedQuery, index: CatalogIndex
) -> FilterCriteria:
    """
    Fold a parsed query into criteria, keeping only values the catalog can satisfy.

    - make: only if offered for the current category; model follows the make
    - model alone: only if it belongs to the current make
    - price: given bounds replace the range, missing ones fall back to the globals
    - features: only those present in the catalog vocabulary
    """
    merged = criteria

    makes = index.makes(criteria.category)
    if parsed.make and contains_choice(makes, parsed.make):
        merged = apply_change(merged, MakeChanged(parsed.make))
        models = index.models(merged.category, merged.make)
        if parsed.model and contains_choice(models, parsed.model):
            merged = apply_change(merged, ModelChanged(parsed.model))
    elif parsed.model and merged.make:
        models = index.models(merged.category, merged.make)
        if contains_choice(models, parsed.model):
            merged = apply_change(merged, ModelChanged(parsed.model))

    if parsed.min_price is not None or parsed.max_price is not None:
        price_range = NumericRange(
            min=parsed.min_price if parsed.min_price is not None else MIN_PRICE,
            max=parsed.max_price if parsed.max_price is not None else MAX_PRICE,
        )
        # An inverted range from the parser is dropped rather than applied
        if price_range.min <= price_range.max:
            merged = merged.with_changes(price_range=price_range)

    if parsed.features:
        vocabulary = index.all_features()
        merged = merged.with_changes(
            features=frozenset(f for f in parsed.features if contains_choice(vocabulary, f))
        )

    return merged
