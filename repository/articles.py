"""Article persistence: CRUD, status changes and category maintenance."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import ARTICLE_STATUSES, DEFAULT_STATUS, RECENT_DAYS, UNCATEGORIZED
from content.slugs import generate_slug
from db.database import get_session
from db.models import Article
from hierarchy.records import ArticleRecord
from repository.errors import ArticleNotFound, RepositoryError, ValidationError

logger = logging.getLogger(__name__)

# Fields callers may set through create() / update()
EDITABLE_FIELDS = (
    "title",
    "slug",
    "content",
    "category",
    "status",
    "parent_id",
    "author_id",
    "featured_image",
    "image_alt",
)
FILTERABLE_FIELDS = ("category", "status", "parent_id", "author_id", "slug")


def _check_status(status: str) -> None:
    if status not in ARTICLE_STATUSES:
        raise ValidationError(f"Invalid status {status!r}; expected one of {', '.join(ARTICLE_STATUSES)}")


def _normalize_category(category: str | None) -> str | None:
    if category is None:
        return None
    category = category.strip()
    return category or None


class ArticleRepository:
    """The `articles` table behind plain CRUD methods returning `ArticleRecord`s."""

    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Failed to %s", action)
            raise RepositoryError(f"Failed to {action}: {exc}") from exc
        finally:
            session.close()

    @staticmethod
    def _load(session: Session, article_id: str) -> Article:
        article = session.get(Article, article_id)
        if article is None:
            raise ArticleNotFound(article_id)
        return article

    @staticmethod
    def _check_parent(session: Session, article_id: str | None, parent_id: str | None) -> None:
        """Parent must exist and must not be the article itself or one of its descendants."""
        if not parent_id:
            return
        if parent_id == article_id:
            raise ValidationError("An article cannot be its own parent")
        parent = session.get(Article, parent_id)
        if parent is None:
            raise ValidationError(f"Parent article {parent_id} does not exist")
        if article_id is None:
            return
        seen: set[str] = set()
        current = parent.parent_id
        while current and current not in seen:
            if current == article_id:
                raise ValidationError("Cannot move an article under one of its descendants")
            seen.add(current)
            ancestor = session.get(Article, current)
            current = ancestor.parent_id if ancestor else None

    # --- reads ---

    def list_all(self) -> list[ArticleRecord]:
        """All articles, newest first."""
        with self._session("fetch articles") as session:
            rows = session.query(Article).order_by(Article.created_at.desc()).all()
            return [ArticleRecord.from_model(a) for a in rows]

    def get(self, article_id: str) -> ArticleRecord | None:
        with self._session("fetch article") as session:
            article = session.get(Article, article_id)
            return ArticleRecord.from_model(article) if article else None

    def filter_by(self, **equalities: Any) -> list[ArticleRecord]:
        """Articles whose fields equal the given values, newest first."""
        unknown = set(equalities) - set(FILTERABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot filter on {', '.join(sorted(unknown))}")
        with self._session("filter articles") as session:
            query = session.query(Article)
            for name, value in equalities.items():
                query = query.filter(getattr(Article, name) == value)
            rows = query.order_by(Article.created_at.desc()).all()
            return [ArticleRecord.from_model(a) for a in rows]

    def count(self, **equalities: Any) -> int:
        unknown = set(equalities) - set(FILTERABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot filter on {', '.join(sorted(unknown))}")
        with self._session("count articles") as session:
            query = session.query(func.count(Article.id))
            for name, value in equalities.items():
                query = query.filter(getattr(Article, name) == value)
            return query.scalar() or 0

    def stats(self, now: datetime | None = None) -> dict[str, int]:
        """Total articles, distinct categories and articles created in the last week."""
        now = now or datetime.utcnow()
        cutoff = now - timedelta(days=RECENT_DAYS)
        with self._session("compute article stats") as session:
            total = session.query(func.count(Article.id)).scalar() or 0
            categories = session.query(func.count(func.distinct(Article.category))).scalar() or 0
            recent = (
                session.query(func.count(Article.id))
                .filter(Article.created_at >= cutoff)
                .scalar()
            )
            return {"total": total, "categories": categories, "recent": recent or 0}

    def category_summary(self) -> list[dict[str, Any]]:
        """Per-category counts, most populous first. Missing categories count as Uncategorized."""
        with self._session("summarize categories") as session:
            rows = (
                session.query(Article.category, func.count(Article.id), func.max(Article.created_at))
                .group_by(Article.category)
                .all()
            )
        summary: dict[str, dict[str, Any]] = {}
        for category, count, latest in rows:
            label = _normalize_category(category) or UNCATEGORIZED
            entry = summary.setdefault(label, {"name": label, "count": 0, "latest_created_at": None})
            entry["count"] += count
            if latest and (entry["latest_created_at"] is None or latest > entry["latest_created_at"]):
                entry["latest_created_at"] = latest
        return sorted(summary.values(), key=lambda e: (-e["count"], e["name"]))

    # --- writes ---

    def create(self, title: str, **fields: Any) -> ArticleRecord:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown article fields: {', '.join(sorted(unknown))}")
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        status = fields.get("status") or DEFAULT_STATUS
        _check_status(status)

        with self._session("create article") as session:
            parent_id = fields.get("parent_id") or None
            self._check_parent(session, None, parent_id)
            now = datetime.utcnow()
            article = Article(
                title=title,
                slug=fields.get("slug") or generate_slug(title),
                content=fields.get("content") or "",
                category=_normalize_category(fields.get("category")),
                status=status,
                parent_id=parent_id,
                author_id=fields.get("author_id"),
                featured_image=fields.get("featured_image"),
                image_alt=fields.get("image_alt"),
                created_at=now,
                updated_at=now,
                published_at=now if status == "published" else None,
            )
            session.add(article)
            session.commit()
            logger.info("Created article %s (%r)", article.id, article.title)
            return ArticleRecord.from_model(article)

    def update(self, article_id: str, **changes: Any) -> ArticleRecord:
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown article fields: {', '.join(sorted(unknown))}")
        if "title" in changes:
            changes["title"] = (changes["title"] or "").strip()
            if not changes["title"]:
                raise ValidationError("Title is required")
        if "status" in changes:
            _check_status(changes["status"])
        if "category" in changes:
            changes["category"] = _normalize_category(changes["category"])
        if "parent_id" in changes:
            changes["parent_id"] = changes["parent_id"] or None

        with self._session("update article") as session:
            article = self._load(session, article_id)
            if "parent_id" in changes:
                self._check_parent(session, article_id, changes["parent_id"])
            if "slug" in changes and not changes["slug"]:
                changes["slug"] = generate_slug(changes.get("title", article.title))
            if "status" in changes and changes["status"] != article.status:
                article.published_at = datetime.utcnow() if changes["status"] == "published" else None
            for name, value in changes.items():
                setattr(article, name, value)
            article.updated_at = datetime.utcnow()
            session.commit()
            logger.info("Updated article %s (%s)", article_id, ", ".join(sorted(changes)) or "no fields")
            return ArticleRecord.from_model(article)

    def update_status(self, article_id: str, status: str) -> ArticleRecord:
        """Publish or unpublish; publishing stamps `published_at`, drafting clears it."""
        _check_status(status)
        with self._session("update article status") as session:
            article = self._load(session, article_id)
            article.status = status
            article.published_at = datetime.utcnow() if status == "published" else None
            article.updated_at = datetime.utcnow()
            session.commit()
            logger.info("Article %s is now %s", article_id, status)
            return ArticleRecord.from_model(article)

    def delete(self, article_id: str) -> None:
        """Delete one article. Children keep their `parent_id` and become orphans."""
        with self._session("delete article") as session:
            article = self._load(session, article_id)
            session.delete(article)
            session.commit()
            logger.info("Deleted article %s", article_id)

    @staticmethod
    def _in_category(name: str, include_null: bool = True) -> Any:
        """WHERE clause for a category label as `category_summary` reports it.

        Uncategorized also covers blank rows and, unless `include_null` is off,
        rows with no category at all.
        """
        if name != UNCATEGORIZED:
            return Article.category == name
        blank = or_(func.trim(Article.category) == "", Article.category == name)
        return or_(Article.category.is_(None), blank) if include_null else blank

    def rename_category(self, old: str, new: str) -> int:
        """Move every article from `old` to `new`. Returns the number of articles changed."""
        new_label = _normalize_category(new)
        if new_label is None:
            raise ValidationError("Category name is required")
        with self._session("rename category") as session:
            changed = (
                session.query(Article)
                .filter(self._in_category(old))
                .update({Article.category: new_label, Article.updated_at: datetime.utcnow()}, synchronize_session=False)
            )
            session.commit()
            logger.info("Renamed category %r -> %r on %d articles", old, new_label, changed)
            return changed

    def clear_category(self, name: str) -> int:
        """Make every article in `name` uncategorized."""
        with self._session("clear category") as session:
            changed = (
                session.query(Article)
                .filter(self._in_category(name, include_null=False))
                .update({Article.category: None, Article.updated_at: datetime.utcnow()}, synchronize_session=False)
            )
            session.commit()
            logger.info("Cleared category %r from %d articles", name, changed)
            return changed
