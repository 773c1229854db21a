"""Typed taxonomy tree parsed from the raw `/tree/public/` document."""

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from domain.errors import AmbiguousCode, MalformedResponse, NotFound
from domain.schemas import NodeKind, TreeNode

logger = logging.getLogger(__name__)

# Keys that mark a JSON object as a taxonomy node
NODE_KEYS = ("id", "tc")


def _iter_node_objects(document: Any) -> Iterator[dict[str, Any]]:
    """Yield every node-shaped object in document order, at any depth."""
    if isinstance(document, dict):
        if all(k in document for k in NODE_KEYS):
            yield document
        for value in document.values():
            yield from _iter_node_objects(value)
    elif isinstance(document, list):
        for item in document:
            yield from _iter_node_objects(item)


def parse_taxonomy_tree(document: Any) -> "TaxonomyTree":
    """
    Parse the raw tree document into typed nodes.

    This is a pure function - it does NOT perform any I/O.
    The nesting layout of the document is not assumed: every object carrying
    both an `id` and a `tc` key is taken as a node, wherever it sits.
    Grouping nodes (neither attribute nor entity) that fail validation, e.g.
    with `"tc": null`, are never looked up and are skipped.

    Raises:
        MalformedResponse: If an attribute or entity node has invalid field values
    """
    nodes: list[TreeNode] = []
    skipped = 0
    for raw in _iter_node_objects(document):
        try:
            nodes.append(TreeNode.model_validate(raw))
        except ValidationError as e:
            if NodeKind.parse(raw.get("type")) is NodeKind.OTHER:
                skipped += 1
                continue
            raise MalformedResponse(f"Invalid taxonomy tree node {raw.get('id')!r}: {e}") from e
    if skipped:
        logger.debug("Skipped %d invalid grouping node(s) in the taxonomy tree", skipped)
    return TaxonomyTree(nodes)


class TaxonomyTree:
    """Full node set for one taxonomy version. Immutable once built."""

    def __init__(self, nodes: list[TreeNode]) -> None:
        self._nodes = tuple(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self._nodes)

    def find(self, code: int, kind: NodeKind) -> list[TreeNode]:
        """Scan the whole tree for nodes with the given taxonomy code and kind."""
        return [n for n in self._nodes if n.taxonomy_code == code and n.kind is kind]

    def find_unique(self, code: int, kind: NodeKind) -> TreeNode:
        """
        Return the single node matching code + kind.

        Raises:
            NotFound: If no node matches
            AmbiguousCode: If more than one node matches
        """
        matches = self.find(code, kind)
        if not matches:
            raise NotFound(code, kind)
        if len(matches) > 1:
            raise AmbiguousCode(code, kind, [m.id for m in matches])
        return matches[0]
