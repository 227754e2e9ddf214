"""Builds article trees from a flat list of records.

Two shapes are produced from the same rows:

- a root tree, where every record is either a root or a child of the record
  named by its ``parent_id``;
- a categorized forest, one tree per category label, where parent links only
  resolve inside the same category.

In both shapes a parent that cannot be resolved in scope (deleted, never
existed, or filed under another category) turns the record into a root, and
parent cycles are broken so that every record is placed exactly once.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from hierarchy.records import ArticleRecord, TreeNode

logger = logging.getLogger(__name__)


def _dedupe(records: Iterable[ArticleRecord]) -> list[ArticleRecord]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[ArticleRecord] = []
    for record in records:
        if record.id in seen:
            logger.warning("Duplicate article id %s ignored", record.id)
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


def _resolve_parents(records: list[ArticleRecord]) -> dict[str, str | None]:
    """Map each id to its parent id, or None when the parent is not in `records`."""
    known = {r.id for r in records}
    parents: dict[str, str | None] = {}
    for record in records:
        parent_id = record.parent_id
        if parent_id and parent_id in known:
            parents[record.id] = parent_id
        else:
            if parent_id:
                logger.debug("Article %s has unresolved parent %s, placing at root", record.id, parent_id)
            parents[record.id] = None
    return parents


def _break_cycles(order: list[str], parents: dict[str, str | None]) -> None:
    """Cut every parent cycle in place.

    The cycle member that comes first in `order` loses its parent link and
    becomes a root. A record pointing at itself is a cycle of one.
    """
    position = {node_id: i for i, node_id in enumerate(order)}
    settled: set[str] = set()
    for start in order:
        path: list[str] = []
        on_path: set[str] = set()
        node = start
        while node is not None and node not in settled:
            if node in on_path:
                cycle = path[path.index(node):]
                head = min(cycle, key=position.__getitem__)
                logger.warning("Parent cycle %s detected, treating %s as root", " -> ".join(cycle), head)
                parents[head] = None
                break
            on_path.add(node)
            path.append(node)
            node = parents[node]
        settled.update(path)


def _link(records: list[ArticleRecord]) -> list[TreeNode]:
    """Two-pass linking: map ids to nodes, then attach each node to its parent or the root list."""
    nodes = {record.id: TreeNode(article=record) for record in records}
    parents = _resolve_parents(records)
    _break_cycles([r.id for r in records], parents)

    roots: list[TreeNode] = []
    for record in records:
        node = nodes[record.id]
        parent_id = parents[record.id]
        if parent_id is not None:
            nodes[parent_id].children.append(node)
        else:
            roots.append(node)
    return roots


def build_root_tree(records: Iterable[ArticleRecord]) -> list[TreeNode]:
    """Return the root-level tree for all records.

    Children keep the order in which records were given.
    """
    return _link(_dedupe(records))


def _created_key(node: TreeNode) -> datetime:
    return node.article.created_at or datetime.min


def _sort_newest_first(nodes: list[TreeNode]) -> list[TreeNode]:
    """Sort every level in place, one level at a time."""
    pending = [nodes]
    while pending:
        level = pending.pop()
        level.sort(key=_created_key, reverse=True)
        pending.extend(node.children for node in level if node.children)
    return nodes


def partition_by_category(records: Iterable[ArticleRecord]) -> dict[str, list[ArticleRecord]]:
    """Group records by category label, most populous category first."""
    buckets: dict[str, list[ArticleRecord]] = {}
    for record in records:
        buckets.setdefault(record.category_label, []).append(record)
    # sorted() is stable, so equal counts keep first-occurrence order
    ordered = sorted(buckets.items(), key=lambda item: len(item[1]), reverse=True)
    return dict(ordered)


def build_categorized_forest(records: Iterable[ArticleRecord]) -> dict[str, list[TreeNode]]:
    """Return one tree per category label.

    A child is nested only under a parent in the same category; otherwise it
    is a root of its own category. Each level is ordered newest first.
    """
    forest: dict[str, list[TreeNode]] = {}
    for label, bucket in partition_by_category(_dedupe(records)).items():
        forest[label] = _sort_newest_first(_link(bucket))
    return forest


def category_options(records: Iterable[ArticleRecord]) -> list[str]:
    """Distinct non-empty categories in order of first occurrence."""
    seen: dict[str, None] = {}
    for record in records:
        if record.category and record.category.strip():
            seen.setdefault(record.category, None)
    return list(seen)


def count_nodes(nodes: Iterable[TreeNode]) -> int:
    return sum(1 for root in nodes for _ in root.walk())
