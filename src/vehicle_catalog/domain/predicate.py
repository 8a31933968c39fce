from __future__ import annotations

from vehicle_catalog.domain.criteria import ANY_YEAR, FilterCriteria
from vehicle_catalog.domain.vehicle import (
    Vehicle,
    normalize_category,
    normalize_features,
    normalize_text,
)


def _text_matches(vehicle_value: str | None, wanted: str) -> bool:
    """Case-insensitive exact match; an empty filter value is no constraint."""
    wanted = normalize_text(wanted)
    if not wanted:
        return True
    return normalize_text(vehicle_value) == wanted


def matches(vehicle: Vehicle, criteria: FilterCriteria) -> bool:
    """
    Decide whether a vehicle passes every active filter dimension (AND).

    Missing price or mileage never fails a range. An auto-derived region
    never excludes anything.
    """
    if criteria.has_category:
        if normalize_category(vehicle.category) != criteria.normalized_category:
            return False

    if not _text_matches(vehicle.make, criteria.make):
        return False
    if not _text_matches(vehicle.model, criteria.model):
        return False

    if not criteria.price_range.contains(vehicle.price):
        return False
    if not criteria.mileage_range.contains(vehicle.mileage):
        return False

    if not _text_matches(vehicle.fuel_type, criteria.fuel_type):
        return False

    if criteria.year != ANY_YEAR and vehicle.year != criteria.year:
        return False

    if not _text_matches(vehicle.color, criteria.color):
        return False

    if criteria.region.is_enforced and not _text_matches(vehicle.state, criteria.region.state):
        return False

    wanted_features = criteria.normalized_features
    if wanted_features and not wanted_features <= normalize_features(vehicle.features):
        return False

    return True
