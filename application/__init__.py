"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing taxonomy code resolution and value-list assembly.

This module exposes the high-level entry point for taxonomy lookups.
"""

from application.resolution import IdResolver
from application.serialize import count_values, dump_result, to_jsonable
from application.service import LoadedTaxonomy, ServiceState, TaxonomyResolutionService
from application.value_lists import ValueListBuilder

__all__ = [
    # Main entry point
    "TaxonomyResolutionService",
    "ServiceState",
    "LoadedTaxonomy",
    # Building blocks
    "IdResolver",
    "ValueListBuilder",
    # Output utilities
    "to_jsonable",
    "dump_result",
    "count_values",
]
