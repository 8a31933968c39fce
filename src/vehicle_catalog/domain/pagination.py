from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Sequence

from vehicle_catalog.domain.errors import ValidationError
from vehicle_catalog.domain.vehicle import Vehicle


DEFAULT_PAGE_SIZE = 12


class PagingValidationError(ValidationError):
    """Raised when paging parameters are invalid."""

    pass


@dataclass(frozen=True, slots=True)
class ResultList:
    """Ranked vehicles for one (criteria, sort order) query."""

    vehicles: tuple[Vehicle, ...]
    query_key: Hashable  # Identity of the inputs that defined this ordering

    def __len__(self) -> int:
        return len(self.vehicles)


class PaginationWindow:
    """
    Incremental reveal of a ResultList prefix (infinite scroll).

    - revealed_count starts at one page and grows one page per advance()
    - never exceeds the bound list's length
    - snaps back to one page when bound to a list with a different query key
    - advance() while nothing is left is a no-op, so redundant visibility
      signals are harmless
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise PagingValidationError("page_size must be > 0", page_size=page_size)
        self._page_size = page_size
        self._revealed_count = page_size
        self._query_key: Hashable | None = None
        self._total = 0

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def revealed_count(self) -> int:
        return min(self._revealed_count, self._total)

    @property
    def has_more(self) -> bool:
        return self._revealed_count < self._total

    @property
    def total_pages(self) -> int:
        return -(-self._total // self._page_size)

    def bind(self, result_list: ResultList) -> None:
        """Attach to a (possibly new) result list, resetting on a new query."""
        if result_list.query_key != self._query_key:
            self._query_key = result_list.query_key
            self.reset()
        self._total = len(result_list)

    def reset(self) -> None:
        self._revealed_count = self._page_size

    def advance(self) -> bool:
        """Reveal one more page. Returns False when there was nothing to reveal."""
        if not self.has_more:
            return False
        self._revealed_count = min(self._revealed_count + self._page_size, self._total)
        return True

    def reveal(self, result_list: ResultList) -> Sequence[Vehicle]:
        self.bind(result_list)
        return result_list.vehicles[: self._revealed_count]
