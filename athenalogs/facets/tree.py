"""Page reference count tree built from S3 path keys."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from athenalogs.athena.models import PathCount

logger = logging.getLogger(__name__)

ROOT_NAME = "/"


class PathTreeNode:
    """One segment of a slash-delimited path key.

    A node's count is None until it is assigned, either by inserting a path
    that ends at the node or by propagating counts up from its children.
    inserted_count holds the total of the counts inserted for paths ending at
    the node, separate from the propagated ref_count.
    """

    def __init__(self, name: str, ref_count: int | None = None):
        self.name = name
        self.ref_count = ref_count
        self.inserted_count: int | None = None
        self._children: dict[str, PathTreeNode] = {}

    def __repr__(self) -> str:
        return f"PathTreeNode({self.name!r}, ref_count={self.ref_count!r})"

    @property
    def is_counted(self) -> bool:
        return self.ref_count is not None

    @property
    def children(self) -> tuple["PathTreeNode", ...]:
        return tuple(self._children.values())

    def child(self, name: str) -> "PathTreeNode | None":
        return self._children.get(name)

    def add_child(self, name: str) -> "PathTreeNode":
        """Return the child with this name, creating it if absent."""
        node = self._children.get(name)
        if node is None:
            node = PathTreeNode(name)
            self._children[name] = node
        return node


@dataclass
class TreeStats:
    """Statistics from a count propagation pass."""

    nodes: int = 0
    leaves: int = 0
    missing_counts: list[str] = field(default_factory=list)


def split_path(path: str) -> list[str]:
    """Split a path key into segment names.

    Empty segments from leading, trailing or doubled slashes are dropped.
    A path with no named segment at all (including "") maps to a single
    empty-name segment so that its count is still recorded.
    """
    segments = [segment for segment in path.split("/") if segment]
    return segments or [""]


def insert_path(root: PathTreeNode, path: str, leaf_count: int) -> PathTreeNode:
    """Add a path as a sub-tree of root and set the count of its last node.

    Example path: misl/misl_tech/signal/idft/index.html

    Keys that differ only in empty segments (a/b.html, a//b.html, /a/b.html)
    end at the same node; their counts are added together.

    Args:
        root: Node the path is relative to.
        path: Slash-delimited path key.
        leaf_count: Reference count for the page the path names.

    Returns:
        The terminal node of the path.
    """
    if path is None:
        raise ValueError("Path must not be None")
    if leaf_count is None:
        raise ValueError(f"Count for path {path!r} must not be None")

    node = root
    for segment in split_path(path):
        node = node.add_child(segment)
    node.inserted_count = (node.inserted_count or 0) + leaf_count
    node.ref_count = node.inserted_count
    return node


def propagate_counts(node: PathTreeNode, stats: TreeStats | None = None) -> int:
    """Sum reference counts from the leaves up to node.

    Every node with children is assigned the sum of its children's counts.
    A leaf that never had a count assigned contributes 0 and is recorded in
    stats.missing_counts.

    A path that is also a prefix of another inserted path (a and a/b) ends at
    an internal node, so its own inserted count is replaced by the sum of its
    children and does not appear in the totals.

    Returns:
        The propagated count of node.
    """
    if stats is None:
        stats = TreeStats()
    return _propagate(node, node.name, stats)


def _propagate(node: PathTreeNode, path: str, stats: TreeStats) -> int:
    stats.nodes += 1
    children = node.children

    if not children:
        stats.leaves += 1
        if node.ref_count is None:
            logger.warning("Leaf %s has no reference count, counting it as 0", path)
            stats.missing_counts.append(path)
            return 0
        return node.ref_count

    total = 0
    for child in children:
        total += _propagate(child, _join(path, child.name), stats)
    node.ref_count = total
    return total


def _join(parent: str, name: str) -> str:
    if parent == ROOT_NAME:
        return ROOT_NAME + name
    return f"{parent}/{name}"


def build_tree(
    path_counts: Iterable[PathCount | tuple[str, int]],
    stats: TreeStats | None = None,
) -> PathTreeNode:
    """Build a reference count tree from (path, count) pairs.

    Args:
        path_counts: PathCount rows or plain (path, count) tuples.
        stats: Optional stats object filled in by the propagation pass.

    Returns:
        Root node named "/" with counts propagated.
    """
    root = PathTreeNode(ROOT_NAME)
    inserted = 0
    for item in path_counts:
        path, count = _unpack(item)
        insert_path(root, path, count)
        inserted += 1

    if inserted:
        propagate_counts(root, stats)
    return root


def _unpack(item: PathCount | tuple[str, int]) -> tuple[str, int]:
    if isinstance(item, PathCount):
        return item.path, item.count
    path, count = item
    return path, count


def walk(root: PathTreeNode) -> Iterator[tuple[int, PathTreeNode]]:
    """Yield (depth, node) pairs in pre-order, children sorted by name."""
    stack = [(0, root)]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        for child in sorted(node.children, key=lambda n: n.name, reverse=True):
            stack.append((depth + 1, child))
