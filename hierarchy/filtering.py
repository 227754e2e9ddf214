"""Table-view filtering and pagination over the root-level list."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from hierarchy.records import ArticleRecord, TreeNode

ALL = "all"

T = TypeVar("T")


@dataclass(frozen=True)
class ArticleFilter:
    """Search / category / status filter. "all" disables a facet."""

    query: str = ""
    category: str = ALL
    status: str = ALL

    def matches(self, article: ArticleRecord) -> bool:
        needle = self.query.lower()
        if needle and needle not in (article.title or "").lower() and needle not in (article.content or "").lower():
            return False
        if self.category != ALL and article.category != self.category:
            return False
        if self.status != ALL and article.status != self.status:
            return False
        return True

    def apply(self, roots: Sequence[TreeNode]) -> list[TreeNode]:
        """Filter root nodes only; children are not searched."""
        return [node for node in roots if self.matches(node.article)]


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(total: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(total / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Keep `page` inside [1, pages]; an empty result still has page 1."""
    return min(max(page, 1), max(pages, 1))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice `items` into one page, clamping an out-of-range page number."""
    pages = total_pages(len(items), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=current,
        page_size=page_size,
        total=len(items),
        total_pages=pages,
    )
