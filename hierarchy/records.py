"""In-memory article records and derived tree nodes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from config import UNCATEGORIZED


@dataclass(frozen=True)
class ArticleRecord:
    """A flat article row, detached from any database session."""

    id: str
    title: str
    slug: str = ""
    content: str = ""
    category: str | None = None
    status: str = "draft"
    parent_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None
    author_id: str | None = None
    featured_image: str | None = None
    image_alt: str | None = None

    @property
    def category_label(self) -> str:
        """Category used for grouping; blank or missing maps to Uncategorized."""
        if self.category and self.category.strip():
            return self.category
        return UNCATEGORIZED

    @classmethod
    def from_model(cls, article: Any) -> ArticleRecord:
        """Build a record from an ORM `Article` (or anything with the same attributes)."""
        return cls(
            id=article.id,
            title=article.title,
            slug=article.slug or "",
            content=article.content or "",
            category=article.category,
            status=article.status or "draft",
            parent_id=article.parent_id,
            created_at=article.created_at,
            updated_at=article.updated_at,
            published_at=article.published_at,
            author_id=article.author_id,
            featured_image=article.featured_image,
            image_alt=article.image_alt,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "content": self.content,
            "category": self.category,
            "status": self.status,
            "parent_id": self.parent_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "author_id": self.author_id,
            "featured_image": self.featured_image,
            "image_alt": self.image_alt,
        }


@dataclass
class TreeNode:
    """An article plus its derived children. `children` is always a list."""

    article: ArticleRecord
    children: list[TreeNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.article.id

    def walk(self):
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict[str, Any]:
        """Nested dict of the subtree, built with an explicit stack so depth is unbounded."""
        data = self.article.to_dict()
        data["children"] = []
        stack = [(self, data)]
        while stack:
            node, node_data = stack.pop()
            for child in node.children:
                child_data = child.article.to_dict()
                child_data["children"] = []
                node_data["children"].append(child_data)
                stack.append((child, child_data))
        return data


def tree_to_json(roots: list[TreeNode]) -> str:
    """JSON array of nested nodes, same shape as `to_dict`.

    Written with an explicit stack because `json.dumps` recurses once per
    nesting level and fails on deep parent chains.
    """
    out: list[str] = []
    stack: list[str | TreeNode] = []

    def push_level(nodes: list[TreeNode]) -> None:
        stack.append("]")
        for i in range(len(nodes) - 1, -1, -1):
            stack.append(nodes[i])
            if i:
                stack.append(", ")
        stack.append("[")

    push_level(roots)
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        fields = json.dumps(item.article.to_dict())
        out.append(fields[:-1] + ', "children": ')
        stack.append("}")
        push_level(item.children)
    return "".join(out)
