"""
Deterministic sample listings.

Feeds the in-memory catalog source for local runs and the database seed
script. Same seed → same dataset every run.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from vehicle_catalog.domain.vehicle import Boost, BoostType, Vehicle


RANDOM_SEED = 42
NUM_VEHICLES = 60


# ==============================================================================
# Market Data
# ==============================================================================

# Make bands with base prices (INR)
MAKES = {
    "economy": {
        "makes": ["Maruti Suzuki", "Tata", "Hyundai", "Renault"],
        "base_price_min": Decimal("400000"),
        "base_price_max": Decimal("900000"),
    },
    "mid_range": {
        "makes": ["Honda", "Toyota", "Mahindra", "Kia"],
        "base_price_min": Decimal("900000"),
        "base_price_max": Decimal("2000000"),
    },
    "premium": {
        "makes": ["BMW", "Mercedes-Benz", "Audi"],
        "base_price_min": Decimal("3000000"),
        "base_price_max": Decimal("6000000"),
    },
}

# (model, category)
MODELS_BY_MAKE = {
    "Maruti Suzuki": [("Swift", "hatchback"), ("Baleno", "hatchback"), ("Brezza", "SUV")],
    "Tata": [("Nexon", "SUV"), ("Tiago", "hatchback"), ("Harrier", "SUV")],
    "Hyundai": [("i20", "hatchback"), ("Creta", "SUV"), ("Verna", "sedan")],
    "Renault": [("Kwid", "hatchback"), ("Kiger", "SUV")],
    "Honda": [("City", "sedan"), ("Amaze", "sedan"), ("Elevate", "SUV")],
    "Toyota": [("Fortuner", "SUV"), ("Innova", "MUV"), ("Glanza", "hatchback")],
    "Mahindra": [("XUV700", "SUV"), ("Thar", "SUV"), ("Scorpio", "SUV")],
    "Kia": [("Seltos", "SUV"), ("Sonet", "SUV"), ("Carens", "MUV")],
    "BMW": [("3 Series", "sedan"), ("X1", "SUV")],
    "Mercedes-Benz": [("C-Class", "sedan"), ("GLA", "SUV")],
    "Audi": [("A4", "sedan"), ("Q3", "SUV")],
}

FUEL_TYPES = ["Petrol", "Diesel", "CNG", "Electric"]
COLORS = ["White", "Silver", "Grey", "Black", "Red", "Blue"]
STATES = ["KA", "MH", "DL", "TN", "TS", "GJ", "HR"]
FEATURES = [
    "Sunroof",
    "Cruise Control",
    "Rear Camera",
    "Android Auto",
    "Apple CarPlay",
    "Alloy Wheels",
    "Keyless Entry",
    "Ventilated Seats",
]

CURRENT_YEAR = 2025


# ==============================================================================
# Generation
# ==============================================================================


def calculate_price(rng: random.Random, make: str, year: int) -> Decimal:
    """
    Price from make band and age.

    ~10% depreciation per year, capped at 70%, ±10% noise, rounded to the
    nearest 1000.
    """
    band = next(
        (data for data in MAKES.values() if make in data["makes"]),
        MAKES["mid_range"],
    )
    base_price = Decimal(rng.randint(int(band["base_price_min"]), int(band["base_price_max"])))

    years_old = max(0, CURRENT_YEAR - year)
    depreciation = min(Decimal("0.10") * years_old, Decimal("0.70"))
    price = base_price * (Decimal("1") - depreciation)
    price *= Decimal(str(round(rng.uniform(0.90, 1.10), 4)))

    price = (price / 1000).quantize(Decimal("1")) * 1000
    return max(price, Decimal("50000"))


def generate_boosts(rng: random.Random, now: datetime) -> tuple[Boost, ...]:
    """Roughly one listing in six carries a boost; some have already expired."""
    if rng.random() > 0.17:
        return ()

    boost_type = rng.choice(list(BoostType))
    expires_at = now + timedelta(days=rng.randint(-3, 14))
    return (Boost(type=boost_type.value, is_active=True, expires_at=expires_at),)


def generate_vehicle(rng: random.Random, vehicle_id: int, now: datetime) -> Vehicle:
    band_name = rng.choice(list(MAKES.keys()))
    make = rng.choice(MAKES[band_name]["makes"])
    model, category = rng.choice(MODELS_BY_MAKE[make])

    # Favor newer years
    year = rng.choices(range(2015, CURRENT_YEAR + 1), weights=[1, 1, 2, 2, 3, 3, 4, 5, 6, 7, 7], k=1)[0]

    years_old = CURRENT_YEAR - year
    max_mileage = min(200000, years_old * 15000 + rng.randint(0, 20000))
    mileage = rng.randint(0, max(1000, max_mileage))

    if year >= 2022:
        fuel_type = rng.choices(FUEL_TYPES, weights=[5, 2, 1, 1], k=1)[0]
    else:
        fuel_type = rng.choices(FUEL_TYPES, weights=[6, 3, 1, 0], k=1)[0]

    return Vehicle(
        id=vehicle_id,
        category=category,
        make=make,
        model=model,
        year=year,
        price=calculate_price(rng, make, year),
        mileage=mileage,
        fuel_type=fuel_type,
        color=rng.choice(COLORS),
        state=rng.choice(STATES),
        features=frozenset(rng.sample(FEATURES, k=rng.randint(0, 4))),
        active_boosts=generate_boosts(rng, now),
        is_premium_listing=band_name == "premium" and rng.random() < 0.5,
        is_featured=rng.random() < 0.08,
        average_rating=round(rng.uniform(3.0, 5.0), 1) if rng.random() < 0.8 else None,
    )


def generate_vehicles(
    count: int = NUM_VEHICLES,
    seed: int = RANDOM_SEED,
    now: datetime | None = None,
) -> list[Vehicle]:
    """
    Generate `count` listings with ids 1..count.

    Boost expiries are relative to `now` (current UTC time by default), the
    rest of the data depends on `seed` only.
    """
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    return [generate_vehicle(rng, vehicle_id, now) for vehicle_id in range(1, count + 1)]
