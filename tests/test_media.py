"""Tests for the media library."""

import base64

import pytest

from repository.errors import MediaNotFound, ValidationError
from repository.media import MediaLibrary, file_extension, is_image, is_video, media_name

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


def data_url(payload: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode()}"


@pytest.fixture
def library(temp_db):
    return MediaLibrary()


def test_upload_and_list(library):
    item = library.upload("My Photo.PNG", "image/png", data_url(PNG_BYTES), width=800, height=600)
    assert item["name"] == "my-photo"
    assert item["original_name"] == "My Photo.PNG"
    assert item["size"] == len(PNG_BYTES)
    assert item["size_label"] == "32 Bytes"
    assert item["extension"] == "png"
    assert library.get(item["id"]) == item
    assert [m["id"] for m in library.list_all()] == [item["id"]]


def test_list_contains_every_upload(library):
    first = library.upload("a.png", "image/png", data_url(PNG_BYTES))
    second = library.upload("b.gif", "image/gif", data_url(PNG_BYTES, "image/gif"))
    assert {m["id"] for m in library.list_all()} == {first["id"], second["id"]}


def test_rejects_non_image(library):
    with pytest.raises(ValidationError, match="image"):
        library.upload("notes.txt", "text/plain", data_url(b"hello", "text/plain"))


def test_rejects_oversized_image(library, monkeypatch):
    monkeypatch.setattr("repository.media.MEDIA_MAX_BYTES", 10)
    with pytest.raises(ValidationError, match="less than"):
        library.upload("big.png", "image/png", data_url(PNG_BYTES))


def test_rejects_bad_payload(library):
    with pytest.raises(ValidationError):
        library.upload("x.png", "image/png", "not a data url")
    with pytest.raises(ValidationError):
        library.upload("x.png", "image/png", "data:image/png;base64,@@@")


def test_rejects_mismatched_type(library):
    with pytest.raises(ValidationError):
        library.upload("x.png", "image/png", data_url(PNG_BYTES, "image/gif"))


def test_delete(library):
    item = library.upload("a.png", "image/png", data_url(PNG_BYTES))
    library.delete(item["id"])
    assert library.get(item["id"]) is None
    with pytest.raises(MediaNotFound):
        library.delete(item["id"])


def test_helpers():
    assert is_image("image/svg+xml")
    assert not is_image("video/mp4")
    assert is_video("video/mp4")
    assert file_extension("image/jpeg") == "jpg"
    assert file_extension("application/x-unknown") == "file"
    assert media_name("Beautiful Landscape.jpg") == "beautiful-landscape"
