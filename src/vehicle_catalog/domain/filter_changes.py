"""
Filter edits as explicit values.

Each dimension of FilterCriteria has one change type. apply_change() is the
single place that knows which finer dimensions a coarser change invalidates:

    category -> make -> model -> (fuel_type, year, color)

A change that does not alter the stored value is a no-op and clears nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union, assert_never

from vehicle_catalog.domain.criteria import (
    ANY_YEAR,
    FilterCriteria,
    NumericRange,
    RegionFilter,
)
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES


@dataclass(frozen=True, slots=True)
class CategoryChanged:
    category: str


@dataclass(frozen=True, slots=True)
class MakeChanged:
    make: str


@dataclass(frozen=True, slots=True)
class ModelChanged:
    model: str


@dataclass(frozen=True, slots=True)
class PriceRangeChanged:
    price_range: NumericRange


@dataclass(frozen=True, slots=True)
class MileageRangeChanged:
    mileage_range: NumericRange


@dataclass(frozen=True, slots=True)
class FuelTypeChanged:
    fuel_type: str


@dataclass(frozen=True, slots=True)
class YearChanged:
    year: int


@dataclass(frozen=True, slots=True)
class ColorChanged:
    color: str


@dataclass(frozen=True, slots=True)
class RegionChanged:
    """An explicit region choice made by the user."""

    state: str


@dataclass(frozen=True, slots=True)
class FeatureToggled:
    feature: str


@dataclass(frozen=True, slots=True)
class FeaturesReplaced:
    features: frozenset[str]


FilterChange = Union[
    CategoryChanged,
    MakeChanged,
    ModelChanged,
    PriceRangeChanged,
    MileageRangeChanged,
    FuelTypeChanged,
    YearChanged,
    ColorChanged,
    RegionChanged,
    FeatureToggled,
    FeaturesReplaced,
]


def _cleared_below_model(criteria: FilterCriteria, **changes: object) -> FilterCriteria:
    return criteria.with_changes(fuel_type="", year=ANY_YEAR, color="", **changes)


def apply_change(criteria: FilterCriteria, change: FilterChange) -> FilterCriteria:
    """Return criteria with the change applied and its dependents cleared."""
    if isinstance(change, CategoryChanged):
        category = change.category.strip() or ALL_CATEGORIES
        if category == criteria.category:
            return criteria
        return _cleared_below_model(criteria, category=category, make="", model="")

    if isinstance(change, MakeChanged):
        make = change.make.strip()
        if make == criteria.make:
            return criteria
        return _cleared_below_model(criteria, make=make, model="")

    if isinstance(change, ModelChanged):
        model = change.model.strip()
        if model == criteria.model:
            return criteria
        return _cleared_below_model(criteria, model=model)

    if isinstance(change, PriceRangeChanged):
        return criteria.with_changes(price_range=change.price_range)

    if isinstance(change, MileageRangeChanged):
        return criteria.with_changes(mileage_range=change.mileage_range)

    if isinstance(change, FuelTypeChanged):
        return criteria.with_changes(fuel_type=change.fuel_type.strip())

    if isinstance(change, YearChanged):
        return criteria.with_changes(year=change.year)

    if isinstance(change, ColorChanged):
        return criteria.with_changes(color=change.color.strip())

    if isinstance(change, RegionChanged):
        state = change.state.strip()
        return criteria.with_changes(region=RegionFilter(state=state, is_user_set=bool(state)))

    if isinstance(change, FeatureToggled):
        feature = change.feature.strip()
        if not feature:
            return criteria
        if feature in criteria.features:
            return criteria.with_changes(features=criteria.features - {feature})
        return criteria.with_changes(features=criteria.features | {feature})

    if isinstance(change, FeaturesReplaced):
        return criteria.with_changes(
            features=frozenset(f.strip() for f in change.features if f.strip())
        )

    assert_never(change)
