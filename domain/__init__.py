"""
Domain layer: Taxonomy records and lookups with minimal external dependencies.

Contains:
- schemas: Pydantic models for attributes, entities, values and wire payloads
- errors: Typed failures raised across layers
- taxonomy: Typed taxonomy tree and code + kind search
"""

from domain.errors import (
    AmbiguousCode,
    ConfigError,
    MalformedResponse,
    NotFound,
    ServiceError,
    ServiceUnavailable,
    TaxonomyServiceError,
    TransportFailure,
)
from domain.schemas import (
    EccairsAttribute,
    EccairsEntity,
    EccairsValue,
    NodeKind,
    TaxonomyVersionInfo,
    TreeNode,
)

__all__ = [
    # Records
    "EccairsAttribute",
    "EccairsEntity",
    "EccairsValue",
    "NodeKind",
    "TaxonomyVersionInfo",
    "TreeNode",
    # Errors
    "TaxonomyServiceError",
    "TransportFailure",
    "ServiceUnavailable",
    "ServiceError",
    "MalformedResponse",
    "NotFound",
    "AmbiguousCode",
    "ConfigError",
]
