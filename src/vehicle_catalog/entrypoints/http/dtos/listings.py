from pydantic import BaseModel, Field

from vehicle_catalog.domain.criteria import SortOrder


class VehicleResponseDTO(BaseModel):
    id: int
    category: str
    make: str
    model: str
    year: int
    price: str | None
    mileage: int | None
    fuel_type: str | None
    color: str | None
    state: str | None
    features: list[str]
    is_premium_listing: bool
    is_featured: bool
    average_rating: float | None


class ListingsQueryDTO(BaseModel):
    """Query parameters for browsing listings."""

    category: str = Field(
        default="ALL",
        description="Category, compared case-insensitively with '_', ' ' and '-' equivalent",
        examples=["four-wheeler"],
    )
    make: str = Field(default="", description="Case-insensitive exact match", examples=["Toyota"])
    model: str = Field(default="", description="Case-insensitive exact match", examples=["Fortuner"])
    price_min: str | None = Field(
        default=None,
        description="Minimum price (inclusive, decimal as string)",
        examples=["500000"],
        pattern=r"^\d+(\.\d{1,2})?$",
    )
    price_max: str | None = Field(
        default=None,
        description="Maximum price (inclusive, decimal as string)",
        examples=["1500000"],
        pattern=r"^\d+(\.\d{1,2})?$",
    )
    mileage_min: int | None = Field(default=None, ge=0, examples=[0])
    mileage_max: int | None = Field(default=None, ge=0, examples=[80000])
    fuel_type: str = Field(default="", examples=["Diesel"])
    year: int = Field(default=0, ge=0, description="0 means any year", examples=[2021])
    color: str = Field(default="", examples=["White"])
    state: str = Field(default="", description="State/region code", examples=["KA"])
    state_user_set: bool = Field(
        default=False,
        description="False when the state was derived from the user's location (not enforced)",
    )
    features: list[str] = Field(
        default_factory=list,
        description="Required features (vehicle must have all of them)",
    )
    sort: SortOrder = Field(default=SortOrder.YEAR_DESC)
    pages: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Number of pages revealed so far (1 + load-more signals)",
    )
    default_category: str = Field(
        default="ALL",
        description="Category the view was opened with (not counted as an active filter)",
    )
    q: str = Field(
        default="",
        max_length=200,
        description="Free-text search; recognised make, model, price and features become filters",
        examples=["diesel fortuner under 30 lakh"],
    )


class SavedSearchFiltersDTO(BaseModel):
    """Applied filters with defaults left out, as stored by saved searches."""

    category: str | None = None
    make: str | None = None
    model: str | None = None
    min_price: str | None = None
    max_price: str | None = None
    min_mileage: int | None = None
    max_mileage: int | None = None
    fuel_type: str | None = None
    year: int | None = None
    location: str | None = None
    features: list[str] | None = None


class ListingsResponseDTO(BaseModel):
    vehicles: list[VehicleResponseDTO]
    total: int
    revealed: int
    has_more: bool
    total_pages: int
    active_filter_count: int
    sort: SortOrder
    filters: SavedSearchFiltersDTO
    query: str = ""
    query_degraded: bool = False


class FilterOptionsQueryDTO(BaseModel):
    category: str = "ALL"
    make: str = ""
    model: str = ""
    feature_search: str = ""


class FilterOptionsResponseDTO(BaseModel):
    categories: list[str]
    makes: list[str]
    models: list[str]
    fuel_types: list[str]
    years: list[int]
    colors: list[str]
    features: list[str]
