"""Media library persistence.

Files are stored inline as base64 data URLs, the same representation
articles use for `featured_image`.
"""

import base64
import binascii
import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import MEDIA_EXTENSIONS, MEDIA_MAX_BYTES
from content.formatting import format_file_size
from db.database import get_session
from db.models import MediaFile
from repository.errors import MediaNotFound, RepositoryError, ValidationError

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)
_NON_NAME = re.compile(r"[^a-z0-9]")


def is_image(mime_type: str) -> bool:
    return mime_type.startswith("image/")


def is_video(mime_type: str) -> bool:
    return mime_type.startswith("video/")


def file_extension(mime_type: str) -> str:
    return MEDIA_EXTENSIONS.get(mime_type, "file")


def media_name(filename: str) -> str:
    """Library name for an upload: the stem before the first dot, slugged."""
    stem = filename.split(".")[0].lower()
    return _NON_NAME.sub("-", stem)


def decoded_size(data_url: str) -> tuple[str, int]:
    """Return (mime type, payload byte count) of a base64 data URL."""
    match = _DATA_URL.match(data_url or "")
    if not match:
        raise ValidationError("Expected a base64 data URL")
    try:
        payload = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"Invalid base64 payload: {exc}") from exc
    return match.group("mime"), len(payload)


def serialize_media(media: MediaFile) -> dict[str, Any]:
    return {
        "id": media.id,
        "name": media.name,
        "original_name": media.original_name,
        "data": media.data,
        "mime_type": media.mime_type,
        "size": media.size,
        "size_label": format_file_size(media.size),
        "extension": file_extension(media.mime_type),
        "width": media.width,
        "height": media.height,
        "created_at": media.created_at.isoformat() if media.created_at else None,
    }


class MediaLibrary:
    """Uploaded images, newest first. One instance is created per application."""

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

    def list_all(self) -> list[dict[str, Any]]:
        with self._session("list media") as session:
            rows = session.query(MediaFile).order_by(MediaFile.created_at.desc()).all()
            return [serialize_media(m) for m in rows]

    def get(self, media_id: str) -> dict[str, Any] | None:
        with self._session("fetch media") as session:
            media = session.get(MediaFile, media_id)
            return serialize_media(media) if media else None

    def upload(
        self,
        filename: str,
        mime_type: str,
        data_url: str,
        width: int | None = None,
        height: int | None = None,
    ) -> dict[str, Any]:
        """Validate and store an image upload."""
        if not is_image(mime_type):
            raise ValidationError("Please select an image file")
        payload_mime, size = decoded_size(data_url)
        if payload_mime != mime_type:
            raise ValidationError(f"Data URL type {payload_mime} does not match {mime_type}")
        if size > MEDIA_MAX_BYTES:
            raise ValidationError(f"Image size must be less than {format_file_size(MEDIA_MAX_BYTES)}")

        with self._session("upload media") as session:
            media = MediaFile(
                name=media_name(filename),
                original_name=filename,
                data=data_url,
                mime_type=mime_type,
                size=size,
                width=width,
                height=height,
                created_at=datetime.utcnow(),
            )
            session.add(media)
            session.commit()
            logger.info("Stored media %s (%s, %s)", media.id, filename, format_file_size(size))
            return serialize_media(media)

    def delete(self, media_id: str) -> None:
        with self._session("delete media") as session:
            media = session.get(MediaFile, media_id)
            if media is None:
                raise MediaNotFound(media_id)
            session.delete(media)
            session.commit()
            logger.info("Deleted media %s", media_id)
