"""Console and JSON rendering of report sections."""

import json
from typing import Any

from athenalogs.facets.referrers import ReferrerEntry
from athenalogs.facets.tree import PathTreeNode, walk

INDENT_WIDTH = 4


def render_domains(domains: list[str]) -> list[str]:
    lines = ["Domains:"]
    if not domains:
        lines.append("No domains found")
    else:
        lines.extend(domains)
    return lines


def render_tree(root: PathTreeNode, domain: str) -> list[str]:
    """Render the tree one node per line, indented 4 spaces per level."""
    lines = [f"Path tree for {domain}"]
    for depth, node in walk(root):
        padding = " " * (INDENT_WIDTH * (depth + 1))
        lines.append(f"{padding}{node.name} {node.ref_count or 0}")
    return lines


def render_referrers(entries: list[ReferrerEntry]) -> list[str]:
    lines = ["Referrer sites:"]
    lines.extend(f"{entry.referrer}, {entry.count}" for entry in entries)
    return lines


def tree_to_dict(node: PathTreeNode) -> dict[str, Any]:
    return {
        "name": node.name,
        "count": node.ref_count or 0,
        "children": [tree_to_dict(child) for child in sorted(node.children, key=lambda n: n.name)],
    }


def report_to_json(
    domain: str,
    domains: list[str] | None,
    tree: PathTreeNode | None,
    referrers: list[ReferrerEntry] | None,
    error: str | None = None,
) -> str:
    """Serialize report sections to JSON. Sections that were not produced are null."""
    document = {
        "domain": domain,
        "domains": domains,
        "path_tree": tree_to_dict(tree) if tree is not None else None,
        "referrers": (
            [{"referrer": e.referrer, "count": e.count} for e in referrers]
            if referrers is not None
            else None
        ),
        "error": error,
    }
    return json.dumps(document, indent=2)
