"""Configuration models (Pydantic classes)."""

from pydantic import BaseModel, Field, field_validator


class ServiceConfig(BaseModel):
    """
    Taxonomy service client configuration.
    - Loaded from configs/taxonomy_service.yaml
    - Overridden by ECCAIRS_* environment variables
    - Consumed by the transport factory
    """

    base_url: str = Field(..., description="Root URL of the taxonomy service, e.g. .../taxonomy-service")
    timeout_s: float = Field(default=30.0, gt=0, description="Per-request connect/read timeout in seconds.")
    max_retries: int = Field(
        default=5,
        ge=0,
        description="Retries after a refused/unreachable connection (total attempts = max_retries + 1).",
    )
    retry_delay_s: float = Field(default=10.0, ge=0, description="Fixed delay between connection retries.")

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        url = str(v).strip()
        if not url:
            raise ValueError(f"Taxonomy service URL '{v}' is not valid.")
        return url.rstrip("/")
