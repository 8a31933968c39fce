from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


ALL_CATEGORIES = "ALL"

_CATEGORY_SEPARATORS = re.compile(r"[\s_-]+")


class BoostType(str, Enum):
    """Known promotional boost types. Producers may send others."""

    HOMEPAGE_SPOTLIGHT = "homepage_spotlight"
    TOP_SEARCH = "top_search"
    FEATURED_BADGE = "featured_badge"


@dataclass(frozen=True, slots=True)
class Boost:
    """
    A time-bounded promotional flag on a listing.

    Pure data: whether a boost is in effect depends on the evaluation
    instant, see ranking.is_boost_effective().
    """

    type: str
    is_active: bool
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class Vehicle:
    id: int
    category: str
    make: str
    model: str
    year: int
    price: Decimal | None = None
    mileage: int | None = None
    fuel_type: str | None = None
    color: str | None = None
    state: str | None = None
    features: frozenset[str] = frozenset()
    active_boosts: tuple[Boost, ...] = ()
    is_premium_listing: bool = False
    is_featured: bool = False
    average_rating: float | None = None


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """The full vehicle collection as delivered by the data layer."""

    vehicles: tuple[Vehicle, ...]
    version: str  # Changes whenever the collection content changes

    def __len__(self) -> int:
        return len(self.vehicles)

    def restricted_to(self, vehicle_ids: frozenset[int]) -> CatalogSnapshot:
        """Sub-collection of the given ids (wishlist mode), insertion order kept."""
        return CatalogSnapshot(
            vehicles=tuple(v for v in self.vehicles if v.id in vehicle_ids),
            version=f"{self.version}:wishlist:{','.join(str(i) for i in sorted(vehicle_ids))}",
        )


def normalize_category(value: str | None) -> str:
    """
    Canonical form used to compare categories from different producers.

    "Four_Wheeler", "four wheeler" and "FOUR-WHEELER" all become "four-wheeler".
    """
    if not value:
        return ""
    return _CATEGORY_SEPARATORS.sub("-", value.strip().lower()).strip("-")


def normalize_text(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_features(features: frozenset[str] | set[str] | tuple[str, ...]) -> frozenset[str]:
    return frozenset(normalize_text(f) for f in features if normalize_text(f))
