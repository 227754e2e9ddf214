"""Article browser: derived tree state kept in step with the repository.

Every mutation is followed by a full refetch and rebuild of both the root
tree and the categorized forest. The derived structures are never patched
in place.
"""

import logging
from typing import Protocol

from config import DEFAULT_PAGE_SIZE
from hierarchy.builder import build_categorized_forest, build_root_tree, category_options
from hierarchy.filtering import ArticleFilter, Page, clamp_page, paginate, total_pages
from hierarchy.records import ArticleRecord, TreeNode
from hierarchy.view_state import ExpansionState
from repository.errors import RepositoryError

logger = logging.getLogger(__name__)


class ArticleSource(Protocol):
    def list_all(self) -> list[ArticleRecord]: ...

    def delete(self, article_id: str) -> None: ...

    def update_status(self, article_id: str, status: str) -> ArticleRecord: ...


class ArticleBrowser:
    """Tree, forest, expansion, filter and page state for one viewer."""

    def __init__(self, source: ArticleSource, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.source = source
        self.tree: list[TreeNode] = []
        self.forest: dict[str, list[TreeNode]] = {}
        self.categories: list[str] = []
        self.expansion = ExpansionState()
        self.filter = ArticleFilter()
        self.page = 1
        self.page_size = page_size
        self.error: str | None = None

    # --- fetching ---

    def refresh(self) -> bool:
        """Refetch and rebuild. On failure keep the previous state and set `error`."""
        try:
            records = self.source.list_all()
        except RepositoryError as exc:
            logger.warning("Refresh failed: %s", exc)
            self.error = str(exc)
            return False

        self.tree = build_root_tree(records)
        self.forest = build_categorized_forest(records)
        self.categories = category_options(records)
        self.expansion.prune(self.tree, self.forest)
        self._clamp_page()
        self.error = None
        logger.debug("Rebuilt %d roots across %d categories", len(self.tree), len(self.forest))
        return True

    def retry(self) -> bool:
        self.error = None
        return self.refresh()

    # --- mutations ---

    def delete(self, article_id: str) -> bool:
        try:
            self.source.delete(article_id)
        except RepositoryError as exc:
            logger.warning("Delete of %s failed: %s", article_id, exc)
            self.error = str(exc)
            return False
        return self.refresh()

    def change_status(self, article_id: str, status: str) -> bool:
        try:
            self.source.update_status(article_id, status)
        except RepositoryError as exc:
            logger.warning("Status change of %s failed: %s", article_id, exc)
            self.error = str(exc)
            return False
        return self.refresh()

    # --- expansion ---

    def toggle(self, key: str) -> bool:
        return self.expansion.toggle(key)

    def expand_all(self) -> None:
        self.expansion.expand_all(self.tree)

    def expand_categories(self) -> None:
        self.expansion.expand_categories(self.forest)

    def collapse_all(self) -> None:
        self.expansion.collapse_all()

    # --- table view ---

    def set_filter(self, query: str | None = None, category: str | None = None, status: str | None = None) -> None:
        """Replace the given facets and go back to the first page."""
        self.filter = ArticleFilter(
            query=self.filter.query if query is None else query,
            category=self.filter.category if category is None else category,
            status=self.filter.status if status is None else status,
        )
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.page = 1

    def go_to(self, page: int) -> int:
        self.page = page
        self._clamp_page()
        return self.page

    def table_page(self) -> Page[TreeNode]:
        return paginate(self.filter.apply(self.tree), self.page, self.page_size)

    def _clamp_page(self) -> None:
        matches = len(self.filter.apply(self.tree))
        self.page = clamp_page(self.page, total_pages(matches, self.page_size))
