"""OpenAI-backed free-text query parser adapter."""

from __future__ import annotations

import json
from decimal import Decimal

from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from vehicle_catalog.domain.errors import QueryParseError
from vehicle_catalog.ports.query_parser import ParsedQuery, QueryParser


SYSTEM_PROMPT = """You turn a used-vehicle search sentence into filters.
Answer with one JSON object and nothing else. Allowed keys:
"make" (string), "model" (string), "minPrice" (number), "maxPrice" (number),
"features" (array of strings). Leave out any key you are not sure about.
Prices are in rupees; convert "lakh" (100000) and "crore" (10000000)."""


class ParsedQueryPayload(BaseModel):
    """Shape of the model's JSON answer. Unknown keys are ignored."""

    make: str | None = None
    model: str | None = None
    min_price: Decimal | None = Field(default=None, alias="minPrice", ge=0)
    max_price: Decimal | None = Field(default=None, alias="maxPrice", ge=0)
    features: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_domain(self) -> ParsedQuery:
        return ParsedQuery(
            make=(self.make or "").strip() or None,
            model=(self.model or "").strip() or None,
            min_price=self.min_price,
            max_price=self.max_price,
            features=tuple(f.strip() for f in self.features if f.strip()),
        )


class OpenAIQueryParser(QueryParser):
    """Query parser using the OpenAI chat completions API in JSON mode."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout_seconds: int = 10) -> None:
        """
        Initialize OpenAI query parser.

        Args:
            api_key: OpenAI API key
            model: Model name
            timeout_seconds: Request timeout in seconds
        """
        if not api_key:
            raise ValueError("OpenAI API key is required")

        self._model = model
        self._client = OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=1,  # Minimal retry; the caller degrades on failure
        )

    def parse(self, text: str) -> ParsedQuery:
        """
        Parse a free-text query.

        Raises:
            QueryParseError: On API failure, empty answer, or invalid JSON shape
        """
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
                response_format={"type": "json_object"},
                temperature=0,
                max_tokens=200,
            )
        except Exception as exc:
            raise QueryParseError("OpenAI API call failed", error_type=type(exc).__name__) from exc

        if not response.choices or not response.choices[0].message.content:
            raise QueryParseError("Empty response from OpenAI API")

        return self.parse_payload(response.choices[0].message.content)

    @staticmethod
    def parse_payload(content: str) -> ParsedQuery:
        try:
            payload = ParsedQueryPayload.model_validate(json.loads(content))
        except (json.JSONDecodeError, PydanticValidationError, TypeError) as exc:
            raise QueryParseError("Unusable parser answer", error_type=type(exc).__name__) from exc
        return payload.to_domain()
