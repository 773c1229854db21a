"""
Taxonomy tree: typed nodes and code + kind search.

All functions in this module are pure (no network or file I/O).
"""

from domain.taxonomy.tree import TaxonomyTree, parse_taxonomy_tree

__all__ = [
    "TaxonomyTree",
    "parse_taxonomy_tree",
]
