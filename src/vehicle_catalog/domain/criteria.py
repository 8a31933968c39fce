from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from vehicle_catalog.domain.errors import ValidationError
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES, normalize_category, normalize_features


# ==============================================================================
# Domain Exceptions
# ==============================================================================


class FilterValidationError(ValidationError):
    """Raised when filter parameters are malformed (not merely stale)."""

    pass


# ==============================================================================
# Global filter bounds
# ==============================================================================

MIN_PRICE = Decimal("50000")
MAX_PRICE = Decimal("5000000")
MIN_MILEAGE = 0
MAX_MILEAGE = 200000
ANY_YEAR = 0


class SortOrder(str, Enum):
    YEAR_DESC = "YEAR_DESC"  # Newest first
    RATING_DESC = "RATING_DESC"
    PRICE_ASC = "PRICE_ASC"
    PRICE_DESC = "PRICE_DESC"
    MILEAGE_ASC = "MILEAGE_ASC"


DEFAULT_SORT_ORDER = SortOrder.YEAR_DESC


@dataclass(frozen=True, slots=True)
class NumericRange:
    """Inclusive range. A missing value can never be excluded by a range."""

    min: Decimal | int
    max: Decimal | int

    def contains(self, value: Decimal | int | None) -> bool:
        if value is None:
            return True
        return self.min <= value <= self.max


DEFAULT_PRICE_RANGE = NumericRange(min=MIN_PRICE, max=MAX_PRICE)
DEFAULT_MILEAGE_RANGE = NumericRange(min=MIN_MILEAGE, max=MAX_MILEAGE)


@dataclass(frozen=True, slots=True)
class RegionFilter:
    """
    State/region selection.

    An auto-derived value (from the user's location) is kept for display
    but never excludes results and never counts as an active filter.
    """

    state: str = ""
    is_user_set: bool = False

    @property
    def is_enforced(self) -> bool:
        return bool(self.state.strip()) and self.is_user_set


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """
    Every filter dimension of the listings view.

    Immutable and hashable so it can key the result memo directly. The
    same shape serves as applied criteria and as the draft of an edit
    session.
    """

    category: str = ALL_CATEGORIES
    make: str = ""
    model: str = ""
    price_range: NumericRange = DEFAULT_PRICE_RANGE
    mileage_range: NumericRange = DEFAULT_MILEAGE_RANGE
    fuel_type: str = ""
    year: int = ANY_YEAR
    color: str = ""
    region: RegionFilter = RegionFilter()
    features: frozenset[str] = frozenset()

    @classmethod
    def initial(cls, category: str = ALL_CATEGORIES) -> FilterCriteria:
        """Fresh criteria for a view opened on the given default category."""
        return cls(category=category or ALL_CATEGORIES)

    @property
    def has_category(self) -> bool:
        return bool(self.category) and self.category != ALL_CATEGORIES

    @property
    def normalized_category(self) -> str:
        return normalize_category(self.category) if self.has_category else ""

    @property
    def normalized_features(self) -> frozenset[str]:
        return normalize_features(self.features)

    def with_changes(self, **changes: object) -> FilterCriteria:
        return replace(self, **changes)  # type: ignore[arg-type]

    def validate(self) -> None:
        """
        Validate filter parameters.

        Raises:
            FilterValidationError: If filter parameters are malformed
        """
        errors: list[dict[str, str]] = []

        if self.price_range.min > self.price_range.max:
            errors.append(
                {
                    "field": "price_range",
                    "message": "min cannot be greater than max",
                    "code": "INVALID_RANGE",
                }
            )
        if self.mileage_range.min > self.mileage_range.max:
            errors.append(
                {
                    "field": "mileage_range",
                    "message": "min cannot be greater than max",
                    "code": "INVALID_RANGE",
                }
            )
        if self.mileage_range.min < 0:
            errors.append(
                {
                    "field": "mileage_range",
                    "message": "min must be >= 0",
                    "code": "INVALID_VALUE",
                }
            )
        if self.year < 0:
            errors.append(
                {
                    "field": "year",
                    "message": "year must be >= 0 (0 means any year)",
                    "code": "INVALID_VALUE",
                }
            )

        if errors:
            raise FilterValidationError(errors=errors)
