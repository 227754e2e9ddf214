"""Tests for schema creation and engine switching."""

from sqlalchemy import inspect

import db.database as db_mod
from db.database import get_engine, get_session, init_db
from db.models import Article


def test_init_db_creates_tables(temp_db):
    tables = set(inspect(get_engine()).get_table_names())
    assert {"articles", "media_files"} <= tables
    columns = {c["name"] for c in inspect(get_engine()).get_columns("articles")}
    assert {"parent_id", "published_at", "author_id", "featured_image", "image_alt"} <= columns


def test_init_db_is_idempotent(temp_db):
    session = get_session()
    session.add(Article(id="keep", title="Survives"))
    session.commit()
    session.close()

    init_db()  # Should not raise or drop rows

    session = get_session()
    assert session.get(Article, "keep").title == "Survives"
    session.close()


def test_reset_engine_picks_up_new_path(temp_db, tmp_path, monkeypatch):
    other = tmp_path / "other" / "folio.db"
    monkeypatch.setattr("config.DB_PATH", other)
    db_mod.reset_engine()
    init_db()
    assert other.exists()
    assert str(get_engine().url).endswith("other/folio.db")
