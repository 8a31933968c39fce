from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from vehicle_catalog.domain.criteria import FilterCriteria
from vehicle_catalog.domain.vehicle import (
    ALL_CATEGORIES,
    Vehicle,
    normalize_category,
    normalize_text,
)


T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True, slots=True)
class ChoiceSets:
    """Options that can be offered for the dependent filter dimensions."""

    makes: tuple[str, ...]
    models: tuple[str, ...]
    fuel_types: tuple[str, ...]
    years: tuple[int, ...]  # Newest first
    colors: tuple[str, ...]


def _distinct_sorted(values: Iterable[T | None], reverse: bool = False) -> tuple[T, ...]:
    present = {v for v in values if v is not None and v != ""}
    return tuple(sorted(present, reverse=reverse))  # type: ignore[type-var]


def contains_choice(choices: Sequence[str], value: str) -> bool:
    """Case-insensitive membership, same matching rule as the predicate."""
    wanted = normalize_text(value)
    return any(normalize_text(choice) == wanted for choice in choices)


class CatalogIndex:
    """
    Derives filter choice-sets from the raw collection.

    Each set is scoped by whichever coarser selections are already made, so
    the UI never offers a value that is structurally impossible:

    - makes: scoped to category
    - models: scoped to category + make
    - fuel types, years, colors: scoped to category + make + model
    """

    def __init__(self, vehicles: Sequence[Vehicle]) -> None:
        self._vehicles = vehicles

    def _scoped(
        self, category: str = ALL_CATEGORIES, make: str = "", model: str = ""
    ) -> list[Vehicle]:
        scoped: Iterable[Vehicle] = self._vehicles

        if category and category != ALL_CATEGORIES:
            wanted_category = normalize_category(category)
            scoped = [v for v in scoped if normalize_category(v.category) == wanted_category]
        if normalize_text(make):
            wanted_make = normalize_text(make)
            scoped = [v for v in scoped if normalize_text(v.make) == wanted_make]
        if normalize_text(model):
            wanted_model = normalize_text(model)
            scoped = [v for v in scoped if normalize_text(v.model) == wanted_model]

        return list(scoped)

    def _values(
        self,
        attribute: Callable[[Vehicle], T | None],
        category: str,
        make: str,
        model: str,
        reverse: bool = False,
    ) -> tuple[T, ...]:
        return _distinct_sorted(
            (attribute(v) for v in self._scoped(category, make, model)),
            reverse=reverse,
        )

    def categories(self) -> tuple[str, ...]:
        """Distinct categories, one representative spelling per normalized value."""
        seen: dict[str, str] = {}
        for vehicle in self._vehicles:
            key = normalize_category(vehicle.category)
            if key and key not in seen:
                seen[key] = vehicle.category
        return tuple(seen[key] for key in sorted(seen))

    def makes(self, category: str = ALL_CATEGORIES) -> tuple[str, ...]:
        return self._values(lambda v: v.make, category, "", "")

    def models(self, category: str = ALL_CATEGORIES, make: str = "") -> tuple[str, ...]:
        return self._values(lambda v: v.model, category, make, "")

    def fuel_types(
        self, category: str = ALL_CATEGORIES, make: str = "", model: str = ""
    ) -> tuple[str, ...]:
        return self._values(lambda v: v.fuel_type, category, make, model)

    def years(
        self, category: str = ALL_CATEGORIES, make: str = "", model: str = ""
    ) -> tuple[int, ...]:
        return self._values(lambda v: v.year, category, make, model, reverse=True)

    def colors(
        self, category: str = ALL_CATEGORIES, make: str = "", model: str = ""
    ) -> tuple[str, ...]:
        return self._values(lambda v: v.color, category, make, model)

    def choice_sets(self, criteria: FilterCriteria) -> ChoiceSets:
        """All dependent choice-sets for the criteria's category/make/model."""
        category, make, model = criteria.category, criteria.make, criteria.model
        return ChoiceSets(
            makes=self.makes(category),
            models=self.models(category, make),
            fuel_types=self.fuel_types(category, make, model),
            years=self.years(category, make, model),
            colors=self.colors(category, make, model),
        )

    def all_features(self) -> tuple[str, ...]:
        return _distinct_sorted(f for v in self._vehicles for f in v.features)

    def search_features(self, term: str) -> tuple[str, ...]:
        """Feature vocabulary narrowed by a case-insensitive substring."""
        needle = normalize_text(term)
        return tuple(f for f in self.all_features() if needle in f.lower())
