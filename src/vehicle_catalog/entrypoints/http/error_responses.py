"""Error response models for the OpenAPI schema.

Every error body has `detail` and `code`; validation errors add `errors`.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """One rejected field."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "mileage_range",
                "message": "min cannot be greater than max",
                "code": "INVALID_RANGE",
            }
        }
    )


class ErrorResponse(BaseModel):
    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "detail": "Vehicle catalog source 'postgres' is unavailable",
                    "code": "CATALOG_UNAVAILABLE",
                },
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "price_range",
                            "message": "min cannot be greater than max",
                            "code": "INVALID_RANGE",
                        }
                    ],
                },
            ]
        }
    )
