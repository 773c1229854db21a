"""
Configuration management: models and loading.

Handles:
- ServiceConfig: Taxonomy service URL, timeout and retry policy
- YAML loading with environment variable overrides

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import load_service_config
from infrastructure.config.models import ServiceConfig

__all__ = [
    "ServiceConfig",
    "load_service_config",
]
