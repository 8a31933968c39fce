from __future__ import annotations

from vehicle_catalog.domain.catalog_index import CatalogIndex, contains_choice
from vehicle_catalog.domain.criteria import (
    ANY_YEAR,
    DEFAULT_MILEAGE_RANGE,
    DEFAULT_PRICE_RANGE,
    FilterCriteria,
    RegionFilter,
)
from vehicle_catalog.domain.filter_changes import FilterChange, apply_change
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES


def revalidate_dependents(criteria: FilterCriteria, index: CatalogIndex) -> FilterCriteria:
    """
    Reset fuel type, year and color that the criteria's category/make/model
    can no longer offer.
    """
    category, make, model = criteria.category, criteria.make, criteria.model
    changes: dict[str, object] = {}

    if criteria.fuel_type and not contains_choice(
        index.fuel_types(category, make, model), criteria.fuel_type
    ):
        changes["fuel_type"] = ""
    if criteria.year != ANY_YEAR and criteria.year not in index.years(category, make, model):
        changes["year"] = ANY_YEAR
    if criteria.color and not contains_choice(index.colors(category, make, model), criteria.color):
        changes["color"] = ""

    return criteria.with_changes(**changes) if changes else criteria


def count_active_filters(
    criteria: FilterCriteria,
    default_category: str = ALL_CATEGORIES,
    wishlist_mode: bool = False,
) -> int:
    """
    Number of dimensions the user actually narrowed.

    Each selected feature counts once. The view's own default category, any
    category in wishlist mode and an auto-derived region are not counted.
    """
    count = 0

    if (
        not wishlist_mode
        and criteria.has_category
        and criteria.category != (default_category or ALL_CATEGORIES)
    ):
        count += 1
    if criteria.make.strip():
        count += 1
    if criteria.model.strip():
        count += 1
    if criteria.price_range != DEFAULT_PRICE_RANGE:
        count += 1
    if criteria.mileage_range != DEFAULT_MILEAGE_RANGE:
        count += 1
    if criteria.fuel_type.strip():
        count += 1
    if criteria.year != ANY_YEAR:
        count += 1
    if criteria.color.strip():
        count += 1
    if criteria.region.is_enforced:
        count += 1
    count += len(criteria.features)

    return count


class FilterStateSynchronizer:
    """
    Owns applied criteria and the draft of an edit-before-apply session.

    - Every edit goes through apply_change(), so dependent filters are
      cleared in the same update as the coarser change.
    - apply_draft() re-validates staged dependent values and decides whether
      the region became an explicit user choice.
    - Resets go back to the view's default category, not to "ALL".
    """

    def __init__(self, default_category: str = ALL_CATEGORIES, wishlist_mode: bool = False) -> None:
        self._default_category = default_category or ALL_CATEGORIES
        self._wishlist_mode = wishlist_mode
        self._applied = self.initial_criteria()
        self._draft: FilterCriteria | None = None
        self._region_at_open = RegionFilter()

    @property
    def default_category(self) -> str:
        return self._default_category

    @property
    def applied(self) -> FilterCriteria:
        return self._applied

    @property
    def draft(self) -> FilterCriteria | None:
        return self._draft

    @property
    def is_editing(self) -> bool:
        return self._draft is not None

    def initial_criteria(self) -> FilterCriteria:
        return FilterCriteria.initial(self._default_category)

    # ------------------------------------------------------------------
    # Immediate edits (applied criteria)
    # ------------------------------------------------------------------

    def change(self, change: FilterChange) -> FilterCriteria:
        self._applied = apply_change(self._applied, change)
        return self._applied

    def replace_applied(self, criteria: FilterCriteria) -> FilterCriteria:
        self._applied = criteria
        return self._applied

    def set_auto_region(self, state: str) -> FilterCriteria:
        """
        Seed the region from the user's location.

        Ignored once the user picked a region explicitly.
        """
        if self._applied.region.is_user_set:
            return self._applied
        self._applied = self._applied.with_changes(
            region=RegionFilter(state=state.strip(), is_user_set=False)
        )
        return self._applied

    # ------------------------------------------------------------------
    # Draft session
    # ------------------------------------------------------------------

    def open_draft(self) -> FilterCriteria:
        self._draft = self._applied
        self._region_at_open = self._applied.region
        return self._draft

    def edit_draft(self, change: FilterChange) -> FilterCriteria:
        self._draft = apply_change(self._draft or self.open_draft(), change)
        return self._draft

    def cancel_draft(self) -> None:
        self._draft = None

    def reset_draft(self) -> FilterCriteria:
        self._draft = self.initial_criteria()
        return self._draft

    def apply_draft(self, index: CatalogIndex) -> FilterCriteria:
        """
        Merge the draft into the applied criteria.

        Args:
            index: Choice-sets of the full collection, used to drop staged
                   fuel type/year/color the draft's selection cannot offer

        Returns:
            The new applied criteria (unchanged if no draft was open)
        """
        if self._draft is None:
            return self._applied

        validated = revalidate_dependents(self._draft, index)

        state = validated.region.state.strip()
        if state != self._region_at_open.state.strip():
            region = RegionFilter(state=state, is_user_set=bool(state))
        else:
            region = RegionFilter(state=state, is_user_set=self._region_at_open.is_user_set)

        self._applied = validated.with_changes(region=region)
        self._draft = None
        return self._applied

    def reset(self) -> FilterCriteria:
        """Confirmed reset of the applied criteria."""
        self._applied = self.initial_criteria()
        self._draft = None
        return self._applied

    # ------------------------------------------------------------------
    # Display metadata
    # ------------------------------------------------------------------

    def active_filter_count(self, criteria: FilterCriteria | None = None) -> int:
        """Active filter count of the given (default: applied) criteria for this view."""
        return count_active_filters(
            criteria or self._applied,
            default_category=self._default_category,
            wishlist_mode=self._wishlist_mode,
        )
