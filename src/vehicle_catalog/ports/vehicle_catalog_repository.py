from __future__ import annotations

from abc import ABC, abstractmethod

from vehicle_catalog.domain.vehicle import CatalogSnapshot


class VehicleCatalogRepository(ABC):
    """
    Port for the vehicle collection source.

    The engine never pushes filters down to the source: implementations
    deliver the whole collection and all filtering, ranking and paging
    happen in memory.

    Contract:
        - vehicles are returned in a stable insertion order
        - the snapshot version changes whenever the collection content changes
        - malformed records (no id or category) are dropped, never returned
    """

    @abstractmethod
    def load(self) -> CatalogSnapshot:
        """
        Load the full vehicle collection.

        Returns:
            CatalogSnapshot with every listing and a content version

        Raises:
            CatalogUnavailableError: If the source cannot be read
        """
        ...
