"""SQLAlchemy models for folio."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    pass


class Article(Base):
    """A content article; `parent_id` is a soft reference, not a foreign key."""

    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String)
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")  # draft, published
    parent_id: Mapped[str | None] = mapped_column(String)  # no FK: deletes never cascade
    author_id: Mapped[str | None] = mapped_column(String, nullable=True)
    featured_image: Mapped[str | None] = mapped_column(Text, nullable=True)  # base64 data URL
    image_alt: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_category", "category"),
        Index("idx_status", "status"),
        Index("idx_parent", "parent_id"),
        Index("idx_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id!r}, title={self.title!r}, parent_id={self.parent_id!r})>"


class MediaFile(Base):
    """An uploaded media library entry stored inline as a data URL."""

    __tablename__ = "media_files"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    original_name: Mapped[str] = mapped_column(String, nullable=False)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(String, nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<MediaFile(id={self.id!r}, name={self.name!r}, mime_type={self.mime_type!r})>"
