"""Configuration loading from YAML files and environment variables."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from domain.errors import ConfigError
from infrastructure.config.models import ServiceConfig
from infrastructure.constants import (
    DEFAULT_BASE_URL,
    ENV_BASE_URL,
    ENV_MAX_RETRIES,
    ENV_RETRY_DELAY_S,
    ENV_TIMEOUT_S,
    SERVICE_CONFIG_FILE,
)

logger = logging.getLogger(__name__)

# Environment variable -> ServiceConfig field
_ENV_OVERRIDES = {
    ENV_BASE_URL: "base_url",
    ENV_TIMEOUT_S: "timeout_s",
    ENV_MAX_RETRIES: "max_retries",
    ENV_RETRY_DELAY_S: "retry_delay_s",
}


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_service_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ServiceConfig:
    """
    Load the taxonomy service config and apply environment overrides.

    Resolution order (later wins):
    1. Built-in defaults (base_url falls back to the public ECCAIRS service)
    2. YAML file (configs/taxonomy_service.yaml unless `path` is given)
    3. ECCAIRS_* environment variables

    A missing YAML file is tolerated only when it was not requested explicitly.

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
        ConfigError: If the YAML or the resolved values are invalid
    """
    env = os.environ if environ is None else environ

    data: dict[str, Any] = {"base_url": DEFAULT_BASE_URL}
    if path is not None:
        data.update(_load_yaml(path))
    elif SERVICE_CONFIG_FILE.exists():
        data.update(_load_yaml(SERVICE_CONFIG_FILE))
    else:
        logger.debug("No %s found; using defaults and environment only", SERVICE_CONFIG_FILE)

    for env_key, field_name in _ENV_OVERRIDES.items():
        raw = env.get(env_key)
        if raw is not None and str(raw).strip():
            data[field_name] = str(raw).strip()
            logger.debug("Config override from %s", env_key)

    try:
        cfg = ServiceConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid taxonomy service configuration: {e}") from e

    logger.debug(
        "Taxonomy service config: base_url=%s timeout_s=%s max_retries=%d retry_delay_s=%s",
        cfg.base_url,
        cfg.timeout_s,
        cfg.max_retries,
        cfg.retry_delay_s,
    )
    return cfg
