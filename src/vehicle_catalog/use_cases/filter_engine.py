from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence

from vehicle_catalog.domain.criteria import FilterCriteria, SortOrder
from vehicle_catalog.domain.pagination import ResultList
from vehicle_catalog.domain.predicate import matches
from vehicle_catalog.domain.ranking import RankingComparator, next_tier_change
from vehicle_catalog.domain.vehicle import CatalogSnapshot, Vehicle

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compute_results(
    vehicles: Sequence[Vehicle],
    criteria: FilterCriteria,
    sort_order: SortOrder,
    now: datetime,
) -> ResultList:
    """
    Filter then rank in one stable sort.

    Pure function of its inputs; `now` decides which boosts are in effect.
    """
    comparator = RankingComparator(sort_order=sort_order, now=now)
    passing = [vehicle for vehicle in vehicles if matches(vehicle, criteria)]

    return ResultList(
        vehicles=tuple(comparator.rank(passing)),
        query_key=(criteria, sort_order),
    )


@dataclass(frozen=True, slots=True)
class _MemoEntry:
    result: ResultList
    valid_until: datetime | None  # None: no boost can expire, valid forever


class FilterEngine:
    """
    Memoizing front for compute_results().

    Entries are keyed by (collection version, criteria, sort order). A cached
    ranking is reused only until the first effective boost among its
    vehicles expires, so an expired boost never keeps its tier.

    The memo belongs to whoever owns the engine instance (an app, a view);
    there is no process-wide cache.
    """

    def __init__(self, clock: Clock = utc_now, max_entries: int = 64) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._memo: OrderedDict[tuple[str, FilterCriteria, SortOrder], _MemoEntry] = OrderedDict()

    def compute(
        self,
        snapshot: CatalogSnapshot,
        criteria: FilterCriteria,
        sort_order: SortOrder,
    ) -> ResultList:
        """
        Ranked vehicles of the snapshot that pass the criteria.

        Args:
            snapshot: Full vehicle collection and its version
            criteria: Applied filter criteria
            sort_order: User-selected secondary ordering

        Returns:
            ResultList, identical for identical inputs while no boost expires
        """
        now = self._clock()
        memo_key = (snapshot.version, criteria, sort_order)

        entry = self._memo.get(memo_key)
        if entry is not None and (entry.valid_until is None or now < entry.valid_until):
            self._memo.move_to_end(memo_key)
            logger.debug(
                "Result list served from memo",
                extra={"snapshot_version": snapshot.version, "results_count": len(entry.result)},
            )
            return entry.result

        result = compute_results(snapshot.vehicles, criteria, sort_order, now)
        self._remember(
            memo_key,
            _MemoEntry(result=result, valid_until=next_tier_change(result.vehicles, now)),
        )

        logger.debug(
            "Result list computed",
            extra={
                "snapshot_version": snapshot.version,
                "catalog_size": len(snapshot),
                "results_count": len(result),
                "sort_order": sort_order.value,
            },
        )
        return result

    def clear(self) -> None:
        self._memo.clear()

    def _remember(self, key: tuple[str, FilterCriteria, SortOrder], entry: _MemoEntry) -> None:
        self._memo[key] = entry
        self._memo.move_to_end(key)
        while len(self._memo) > self._max_entries:
            self._memo.popitem(last=False)
