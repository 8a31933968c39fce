from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class ParsedQuery:
    """
    Best-effort structured reading of a free-text search.

    Every field is optional; an empty ParsedQuery means "no additional
    filters".
    """

    make: str | None = None
    model: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    features: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> ParsedQuery:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self == ParsedQuery.empty()


class QueryParser(ABC):
    """Port for the external free-text to filters service."""

    @abstractmethod
    def parse(self, text: str) -> ParsedQuery:
        """
        Parse a free-text query into a partial set of filters.

        Args:
            text: The user's literal query

        Returns:
            ParsedQuery with whatever fields the service could extract

        Raises:
            QueryParseError: If the service fails or returns an unusable answer
        """
        ...
