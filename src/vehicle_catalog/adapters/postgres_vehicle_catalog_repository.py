"""PostgreSQL implementation of VehicleCatalogRepository."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from vehicle_catalog.domain.errors import CatalogUnavailableError
from vehicle_catalog.domain.vehicle import Boost, CatalogSnapshot, Vehicle
from vehicle_catalog.infra.db.models.vehicle import LISTING_STATUS_PUBLISHED, VehicleRow
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository

logger = logging.getLogger(__name__)


class PostgresVehicleCatalogRepository(VehicleCatalogRepository):
    """
    PostgreSQL implementation of VehicleCatalogRepository.

    - Loads every published listing with its boosts (one SELECT + one
      SELECT IN for boosts)
    - Derives the snapshot version from the loaded content, boosts included,
      so a boost added, deactivated or removed yields a new version even
      though vehicles.updated_at did not move
    - Drops rows without a category and logs how many were dropped
    - Converts VehicleRow (infrastructure) to Vehicle (domain)
    """

    def __init__(self, session: Session) -> None:
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    def load(self) -> CatalogSnapshot:
        """
        Load the published collection.

        Returns:
            CatalogSnapshot in id order

        Raises:
            CatalogUnavailableError: If the database cannot be queried
        """
        try:
            query = (
                select(VehicleRow)
                .where(VehicleRow.status == LISTING_STATUS_PUBLISHED)
                .options(selectinload(VehicleRow.boosts))
                .order_by(VehicleRow.id)
            )
            rows = self._session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to load vehicle catalog",
                exc_info=exc,
                extra={"source": "postgres"},
            )
            raise CatalogUnavailableError("postgres") from exc

        vehicles = [self._to_domain(row) for row in rows if row.category]
        dropped = len(rows) - len(vehicles)
        if dropped:
            logger.warning(
                "Dropped malformed vehicle rows",
                extra={"dropped_count": dropped, "source": "postgres"},
            )

        return CatalogSnapshot(vehicles=tuple(vehicles), version=self._fingerprint(vehicles))

    def _to_domain(self, row: VehicleRow) -> Vehicle:
        """
        Convert database model (VehicleRow) to domain entity (Vehicle).

        Args:
            row: SQLAlchemy VehicleRow model with boosts loaded

        Returns:
            Vehicle domain entity
        """
        return Vehicle(
            id=row.id,
            category=row.category or "",
            make=row.make,
            model=row.model,
            year=row.year,
            price=row.price,  # Already Decimal from NUMERIC column
            mileage=row.mileage,
            fuel_type=row.fuel_type,
            color=row.color,
            state=row.state,
            features=frozenset(row.features or ()),
            active_boosts=tuple(
                Boost(type=boost.type, is_active=boost.is_active, expires_at=boost.expires_at)
                for boost in row.boosts
            ),
            is_premium_listing=row.is_premium_listing,
            is_featured=row.is_featured,
            average_rating=row.average_rating,
        )

    @staticmethod
    def _fingerprint(vehicles: Sequence[Vehicle]) -> str:
        """Stable digest of every field the filter engine reads."""
        digest = hashlib.sha256()
        for vehicle in vehicles:
            boosts = sorted(
                (boost.type, boost.is_active, boost.expires_at.isoformat())
                for boost in vehicle.active_boosts
            )
            fields = (
                vehicle.id,
                vehicle.category,
                vehicle.make,
                vehicle.model,
                vehicle.year,
                str(vehicle.price),
                vehicle.mileage,
                vehicle.fuel_type,
                vehicle.color,
                vehicle.state,
                sorted(vehicle.features),
                boosts,
                vehicle.is_premium_listing,
                vehicle.is_featured,
                vehicle.average_rating,
            )
            digest.update(repr(fields).encode())
            digest.update(b"\n")
        return f"pg-{len(vehicles)}-{digest.hexdigest()[:16]}"
