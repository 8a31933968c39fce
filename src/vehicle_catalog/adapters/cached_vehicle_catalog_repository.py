"""Cached vehicle catalog repository (cache-aside, TTL)."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from vehicle_catalog.domain.vehicle import CatalogSnapshot
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository

logger = logging.getLogger(__name__)


DEFAULT_TTL = timedelta(minutes=5)


class CatalogSnapshotCache:
    """
    Holds at most one snapshot for a bounded time.

    Created and owned by the caller (an app instance, a test); nothing is
    shared at module level.
    """

    def __init__(self, clock: Callable[[], datetime], ttl: timedelta = DEFAULT_TTL) -> None:
        self._clock = clock
        self._ttl = ttl
        self._snapshot: CatalogSnapshot | None = None
        self._stored_at: datetime | None = None

    def get(self) -> CatalogSnapshot | None:
        if self._snapshot is None or self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self._ttl:
            self.invalidate()
            return None
        return self._snapshot

    def set(self, snapshot: CatalogSnapshot) -> None:
        self._snapshot = snapshot
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._snapshot = None
        self._stored_at = None


class CachedVehicleCatalogRepository(VehicleCatalogRepository):
    """Serves the collection from the cache, loading from the primary on a miss."""

    def __init__(self, primary_repository: VehicleCatalogRepository, cache: CatalogSnapshotCache) -> None:
        """
        Initialize cached repository.

        Args:
            primary_repository: Source of truth (e.g. Postgres)
            cache: Snapshot cache owned by the caller
        """
        self._primary = primary_repository
        self._cache = cache

    def load(self) -> CatalogSnapshot:
        cached = self._cache.get()
        if cached is not None:
            logger.debug("Catalog cache hit", extra={"snapshot_version": cached.version})
            return cached

        logger.debug("Catalog cache miss")
        snapshot = self._primary.load()
        self._cache.set(snapshot)
        return snapshot
