from __future__ import annotations

from typing import Sequence

from vehicle_catalog.domain.vehicle import CatalogSnapshot, Vehicle
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository


class InMemoryVehicleCatalogRepository(VehicleCatalogRepository):
    """
    Canonical contract implementation for tests and local runs.

    - Stores vehicles in insertion order
    - Drops records without an id or category
    - Bumps the snapshot version on every replace()
    """

    def __init__(self, vehicles: Sequence[Vehicle] = ()) -> None:
        self._revision = 0
        self._vehicles: tuple[Vehicle, ...] = ()
        self.replace(vehicles)

    def replace(self, vehicles: Sequence[Vehicle]) -> None:
        self._vehicles = tuple(v for v in vehicles if v.id is not None and v.category)
        self._revision += 1

    def load(self) -> CatalogSnapshot:
        return CatalogSnapshot(vehicles=self._vehicles, version=f"memory-{self._revision}")
