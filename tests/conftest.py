"""Shared fixtures: a throwaway SQLite database and record factories."""

from datetime import datetime, timedelta

import pytest

import db.database as db_mod
from db.database import init_db
from hierarchy.records import ArticleRecord

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the app at a fresh database file for one test."""
    db_path = tmp_path / "test.db"
    monkeypatch.setattr("config.DB_PATH", db_path)
    db_mod.reset_engine()
    init_db()
    yield db_path
    db_mod.reset_engine()


def record(
    id: str,
    parent_id: str | None = None,
    category: str | None = None,
    minutes: int = 0,
    **fields,
) -> ArticleRecord:
    """An article created `minutes` after BASE_TIME."""
    fields.setdefault("title", f"Article {id}")
    return ArticleRecord(
        id=id,
        parent_id=parent_id,
        category=category,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **fields,
    )
