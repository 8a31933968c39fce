from __future__ import annotations

from dataclasses import dataclass

from vehicle_catalog.domain.catalog_index import CatalogIndex, ChoiceSets
from vehicle_catalog.domain.criteria import FilterCriteria
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository


@dataclass(frozen=True, slots=True)
class GetFilterOptionsRequest:
    category: str = ALL_CATEGORIES
    make: str = ""
    model: str = ""
    feature_search: str = ""


@dataclass(frozen=True, slots=True)
class GetFilterOptionsResponse:
    categories: tuple[str, ...]
    choice_sets: ChoiceSets
    features: tuple[str, ...]


class GetFilterOptions:
    """Selectable values for every filter control, scoped by the current selection."""

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        self._repository = vehicle_catalog_repository

    def execute(self, request: GetFilterOptionsRequest) -> GetFilterOptionsResponse:
        index = CatalogIndex(self._repository.load().vehicles)
        selection = FilterCriteria(
            category=request.category or ALL_CATEGORIES,
            make=request.make,
            model=request.model,
        )

        return GetFilterOptionsResponse(
            categories=index.categories(),
            choice_sets=index.choice_sets(selection),
            features=index.search_features(request.feature_search),
        )
