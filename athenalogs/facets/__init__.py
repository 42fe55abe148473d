"""Report facets derived from the web log table."""

from .referrers import NO_REFERRER, ReferrerEntry, aggregate, top
from .service import AthenaLogQueryService, LogQueryService
from .tree import PathTreeNode, TreeStats, build_tree, insert_path, propagate_counts, walk

__all__ = [
    "NO_REFERRER",
    "ReferrerEntry",
    "aggregate",
    "top",
    "AthenaLogQueryService",
    "LogQueryService",
    "PathTreeNode",
    "TreeStats",
    "build_tree",
    "insert_path",
    "propagate_counts",
    "walk",
]
