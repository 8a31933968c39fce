from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any, Iterable, Sequence

from vehicle_catalog.domain.criteria import SortOrder
from vehicle_catalog.domain.vehicle import Boost, BoostType, Vehicle


class BoostTier(IntEnum):
    """Promotional ranking buckets, higher value ranks first."""

    NONE = 0
    OTHER_BOOST = 1
    PREMIUM_LISTING = 2
    FEATURED = 3
    TOP_SEARCH = 4
    HOMEPAGE_SPOTLIGHT = 5


_TIER_BY_BOOST_TYPE: dict[str, BoostTier] = {
    BoostType.HOMEPAGE_SPOTLIGHT.value: BoostTier.HOMEPAGE_SPOTLIGHT,
    BoostType.TOP_SEARCH.value: BoostTier.TOP_SEARCH,
    BoostType.FEATURED_BADGE.value: BoostTier.FEATURED,
}


def is_boost_effective(boost: Boost, now: datetime) -> bool:
    return boost.is_active and boost.expires_at > now


def effective_boosts(vehicle: Vehicle, now: datetime) -> list[Boost]:
    return [boost for boost in vehicle.active_boosts if is_boost_effective(boost, now)]


def resolve_tier(vehicle: Vehicle, now: datetime) -> BoostTier:
    """
    Highest tier the vehicle qualifies for at instant `now`.

    homepage_spotlight > top_search > featured_badge (or is_featured)
    > premium listing > any other effective boost > none
    """
    boosts = effective_boosts(vehicle, now)
    boost_tiers = [_TIER_BY_BOOST_TYPE.get(boost.type, BoostTier.OTHER_BOOST) for boost in boosts]

    if vehicle.is_featured:
        boost_tiers.append(BoostTier.FEATURED)
    if vehicle.is_premium_listing:
        boost_tiers.append(BoostTier.PREMIUM_LISTING)

    return max(boost_tiers, default=BoostTier.NONE)


def next_tier_change(vehicles: Iterable[Vehicle], now: datetime) -> datetime | None:
    """
    Earliest instant after `now` at which any vehicle's tier may drop.

    Tiers only change when an effective boost expires, so a ranking computed
    at `now` stays valid until then.
    """
    expiries = [
        boost.expires_at for vehicle in vehicles for boost in effective_boosts(vehicle, now)
    ]
    return min(expiries, default=None)


def _missing_last(value: Decimal | int | None, descending: bool = False) -> tuple[bool, Any]:
    if value is None:
        return (True, 0)
    return (False, -value if descending else value)


def sort_value(vehicle: Vehicle, sort_order: SortOrder) -> tuple[Any, ...]:
    """Secondary ordering key for the user-selected sort order."""
    if sort_order is SortOrder.RATING_DESC:
        return (-(vehicle.average_rating or 0),)
    if sort_order is SortOrder.PRICE_ASC:
        return _missing_last(vehicle.price)
    if sort_order is SortOrder.PRICE_DESC:
        return _missing_last(vehicle.price, descending=True)
    if sort_order is SortOrder.MILEAGE_ASC:
        return _missing_last(vehicle.mileage)
    return (-vehicle.year,)


@dataclass(frozen=True, slots=True)
class RankingComparator:
    """
    Total order over vehicles: boost tier first, then the sort order.

    Equal keys keep their input order because ranking is always one stable
    sort over the whole filtered set.
    """

    sort_order: SortOrder
    now: datetime

    def key(self, vehicle: Vehicle) -> tuple[Any, ...]:
        return (-resolve_tier(vehicle, self.now), *sort_value(vehicle, self.sort_order))

    def compare(self, a: Vehicle, b: Vehicle) -> int:
        key_a, key_b = self.key(a), self.key(b)
        if key_a < key_b:
            return -1
        if key_a > key_b:
            return 1
        return 0

    def rank(self, vehicles: Sequence[Vehicle]) -> list[Vehicle]:
        return sorted(vehicles, key=self.key)
