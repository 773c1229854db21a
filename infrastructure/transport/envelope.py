"""Standard response envelope of the taxonomy service."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from domain.errors import MalformedResponse

logger = logging.getLogger(__name__)


class TaxonomyServiceResponse(BaseModel):
    """Wire-level wrapper every taxonomy service call returns.

    `data` is kept as the raw decoded document; its shape varies per endpoint.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: Any
    return_code: str | None = Field(default=None, alias="returnCode")
    error_details: str | None = Field(default=None, alias="errorDetails")

    @field_validator("return_code", "error_details", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str | None:
        return None if v is None else str(v)


def decode_envelope(raw_body: str | bytes) -> TaxonomyServiceResponse:
    """
    Decode a raw response body into the envelope.

    Raises:
        MalformedResponse: If the body is not JSON, not an object, or has no `data`
    """
    try:
        envelope = TaxonomyServiceResponse.model_validate_json(raw_body)
    except ValidationError as e:
        preview = raw_body[:200] if raw_body else raw_body
        raise MalformedResponse(f"Unexpected taxonomy service response envelope: {e}. Body: {preview!r}") from e

    if envelope.error_details:
        logger.warning(
            "Taxonomy service reported error details (returnCode=%s): %s",
            envelope.return_code,
            envelope.error_details,
        )
    return envelope


def select(document: Any, *path: str | int) -> Any:
    """
    Return the value at `path` inside a decoded document.

    String keys index objects, integers index arrays.

    Examples:
        >>> select({"map": {"12": [1, 2]}}, "map", "12", 1)
        2

    Raises:
        MalformedResponse: If any step of the path is missing
    """
    current = document
    for step, key in enumerate(path):
        if isinstance(key, int) and isinstance(current, list) and -len(current) <= key < len(current):
            current = current[key]
        elif isinstance(key, str) and isinstance(current, dict) and key in current:
            current = current[key]
        else:
            walked = ".".join(str(k) for k in path[:step]) or "$"
            raise MalformedResponse(f"Expected field '{key}' under '{walked}' in taxonomy service response")
    return current
