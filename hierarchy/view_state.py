"""Expand/collapse state for tree and category views."""

from collections.abc import Iterable, Mapping

from config import CATEGORY_KEY_PREFIX
from hierarchy.records import TreeNode


def category_key(name: str) -> str:
    """Expansion key for a category header."""
    return f"{CATEGORY_KEY_PREFIX}{name}"


class ExpansionState:
    """Set of expanded node keys. Unknown keys are collapsed.

    Keys are article ids or `category_key(name)` for category headers. The
    state knows nothing about how trees are built, so callers re-drive it
    from the latest tree after every rebuild.
    """

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._expanded: set[str] = set(keys)

    @property
    def expanded(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def is_expanded(self, key: str) -> bool:
        return key in self._expanded

    def toggle(self, key: str) -> bool:
        """Flip `key`; returns the new expanded flag."""
        if key in self._expanded:
            self._expanded.discard(key)
            return False
        self._expanded.add(key)
        return True

    def expand_all(self, tree: Iterable[TreeNode]) -> None:
        """Expand every node in `tree`."""
        for root in tree:
            self._expanded.update(node.id for node in root.walk())

    def expand_categories(self, forest: Mapping[str, list[TreeNode]]) -> None:
        """Expand every category header and every node under it."""
        for name, roots in forest.items():
            self._expanded.add(category_key(name))
            self.expand_all(roots)

    def collapse_all(self) -> None:
        self._expanded = set()

    def prune(self, tree: Iterable[TreeNode], forest: Mapping[str, list[TreeNode]] | None = None) -> None:
        """Forget keys for nodes that no longer exist after a rebuild.

        Category keys are only checked when `forest` is given.
        """
        live = {node.id for root in tree for node in root.walk()}
        if forest is not None:
            live.update(category_key(name) for name in forest)
        else:
            live.update(k for k in self._expanded if k.startswith(CATEGORY_KEY_PREFIX))
        self._expanded &= live

    def __contains__(self, key: str) -> bool:
        return key in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)
