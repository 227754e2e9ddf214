"""Request bodies for the article and media endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

Status = Literal["draft", "published"]


class ArticleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str | None = None
    content: str = ""
    category: str | None = None
    status: Status = "draft"
    parent_id: str | None = Field(None, description="Parent article id, null for a root article")
    author_id: str | None = None
    featured_image: str | None = Field(None, description="Base64 data URL")
    image_alt: str | None = None


class ArticleUpdate(BaseModel):
    """Partial update; only fields present in the request body are changed."""

    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = None
    content: str | None = None
    category: str | None = None
    status: Status | None = None
    parent_id: str | None = None
    author_id: str | None = None
    featured_image: str | None = None
    image_alt: str | None = None


class StatusChange(BaseModel):
    status: Status


class CategoryRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class MediaUpload(BaseModel):
    filename: str = Field(..., min_length=1)
    mime_type: str
    data: str = Field(..., description="Base64 data URL")
    width: int | None = Field(None, ge=1)
    height: int | None = Field(None, ge=1)
