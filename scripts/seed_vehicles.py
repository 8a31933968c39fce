#!/usr/bin/env python3
"""
Seed the vehicles table with deterministic sample listings.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Boosts included, some of them already expired
- Sample ids are kept; the vehicles id sequence is moved past them afterwards

Usage:
    python scripts/seed_vehicles.py [count]
"""

from __future__ import annotations

import sys

from sqlalchemy import text

from vehicle_catalog.domain.vehicle import Vehicle
from vehicle_catalog.infra.db.models.vehicle import BoostRow, VehicleRow
from vehicle_catalog.infra.db.session import get_session
from vehicle_catalog.infra.sample_catalog import NUM_VEHICLES, RANDOM_SEED, generate_vehicles


# Explicit ids do not advance the SERIAL sequence; later inserts would collide
SYNC_VEHICLE_ID_SEQUENCE = text(
    "SELECT setval(pg_get_serial_sequence('vehicles', 'id'), COALESCE(MAX(id), 1)) FROM vehicles"
)


def to_row(vehicle: Vehicle) -> VehicleRow:
    return VehicleRow(
        id=vehicle.id,
        category=vehicle.category,
        make=vehicle.make,
        model=vehicle.model,
        year=vehicle.year,
        price=vehicle.price,
        mileage=vehicle.mileage,
        fuel_type=vehicle.fuel_type,
        color=vehicle.color,
        state=vehicle.state,
        features=sorted(vehicle.features),
        is_premium_listing=vehicle.is_premium_listing,
        is_featured=vehicle.is_featured,
        average_rating=vehicle.average_rating,
        boosts=[
            BoostRow(type=boost.type, is_active=boost.is_active, expires_at=boost.expires_at)
            for boost in vehicle.active_boosts
        ],
    )


def seed_vehicles(num_vehicles: int = NUM_VEHICLES, seed: int = RANDOM_SEED) -> None:
    vehicles = generate_vehicles(num_vehicles, seed=seed)

    print(f"🌱 Seeding database with {num_vehicles} vehicles (seed={seed})...")

    with get_session() as session:
        # Boosts go with their vehicles (ON DELETE CASCADE)
        deleted_count = session.query(VehicleRow).delete()
        print(f"🗑️  Deleted {deleted_count} existing vehicles")

        rows = [to_row(vehicle) for vehicle in vehicles]
        session.add_all(rows)
        session.flush()

        session.execute(SYNC_VEHICLE_ID_SEQUENCE)

        boosted = sum(1 for vehicle in vehicles if vehicle.active_boosts)
        print(f"✅ Seeded {len(rows)} vehicles ({boosted} with boosts)")

        print("\n📊 Sample vehicles:")
        for i, vehicle in enumerate(vehicles[:5], 1):
            print(
                f"   {i}. {vehicle.year} {vehicle.make} {vehicle.model} [{vehicle.category}] - "
                f"₹{vehicle.price:,.0f} ({vehicle.fuel_type}, {vehicle.state})"
            )

        if len(vehicles) > 5:
            print(f"   ... and {len(vehicles) - 5} more")


if __name__ == "__main__":
    try:
        seed_vehicles(int(sys.argv[1]) if len(sys.argv) > 1 else NUM_VEHICLES)
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
