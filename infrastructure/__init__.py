"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Taxonomy service transports (HTTP, fixtures)
- Configuration loading (YAML, environment)
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import ServiceConfig, load_service_config
from infrastructure.transport import Transport, decode_envelope, make_transport

__all__ = [
    # Transports (most commonly used)
    "make_transport",
    "Transport",
    "decode_envelope",
    # Configuration
    "load_service_config",
    "ServiceConfig",
]
