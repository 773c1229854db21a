"""External taxonomy code -> internal id resolution with an in-memory cache."""

import logging
import threading

from domain.schemas import NodeKind, TreeNode
from domain.taxonomy import TaxonomyTree

logger = logging.getLogger(__name__)


class IdResolver:
    """
    Resolve (taxonomy code, kind) pairs against one loaded tree.

    The cache grows monotonically and is never evicted. A resolver is bound to
    exactly one tree: reloading the tree means building a new resolver, so a
    cached id can never outlive the tree it was found in.
    """

    def __init__(self, tree: TaxonomyTree) -> None:
        self.tree = tree
        # Located node kept whole so attribute/entity records need no second scan
        self._nodes: dict[tuple[int, NodeKind], TreeNode] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._nodes)

    def cached(self, code: int, kind: NodeKind) -> int | None:
        node = self._nodes.get((code, kind))
        return node.id if node is not None else None

    def resolve_id(self, code: int, kind: NodeKind) -> int:
        """
        Return the internal id of the node with the given code and kind.

        Raises:
            NotFound: If no node matches
            AmbiguousCode: If more than one node matches
        """
        return self.find_node(code, kind).id

    def find_node(self, code: int, kind: NodeKind) -> TreeNode:
        """Cache first; on a miss scan the whole tree once for this pair."""
        node = self._nodes.get((code, kind))
        if node is not None:
            return node

        node = self.tree.find_unique(code, kind)
        with self._lock:
            node = self._nodes.setdefault((code, kind), node)
        logger.debug("Resolved %s %d -> internal id %d", kind.name.lower(), code, node.id)
        return node
