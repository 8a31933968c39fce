"""Domain error classes.

Protocol-agnostic errors that represent business failures.
These errors are translated to HTTP responses by the entrypoint layer.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Contains business error information that can be translated to
    any protocol-specific format.
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., field names, values)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Malformed input rejected at a boundary.

    Filter values that merely became stale after a coarser filter changed are
    NOT validation errors; those are cleared by the reset cascade.

    Examples:
        - price range with min > max
        - negative year
        - non-positive page size

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "price_min", "message": "Must be positive"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class CatalogUnavailableError(DomainError):
    """The vehicle collection could not be loaded from its source.

    Protocol mappings:
        - REST: 503 Service Unavailable
    """

    error_code: str = "CATALOG_UNAVAILABLE"

    def __init__(self, source: str, **context: Any) -> None:
        super().__init__(f"Vehicle catalog source '{source}' is unavailable", source=source, **context)


class QueryParseError(DomainError):
    """The external free-text parser failed or returned garbage.

    Never surfaced to clients: the free-text search use case degrades to
    "no additional filters" when it sees this error.
    """

    error_code: str = "QUERY_PARSE_ERROR"
