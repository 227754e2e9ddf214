"""Tests for the /api article, category and media endpoints."""

import base64
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from db.database import get_session
from db.models import Article
from main import app


@pytest.fixture(autouse=True)
def setup_db(temp_db):
    """Seed a small hierarchy in a temporary database."""
    session = get_session()
    now = datetime.utcnow()
    articles = [
        Article(id="root", title="Getting started", slug="getting-started", content="Welcome",
                category="Guides", status="published", created_at=now - timedelta(hours=5),
                updated_at=now - timedelta(hours=5), published_at=now - timedelta(hours=5)),
        Article(id="child", title="Installing foo", slug="installing-foo", content="pip install foo",
                category="Guides", status="draft", parent_id="root",
                created_at=now - timedelta(hours=4), updated_at=now - timedelta(hours=4)),
        Article(id="cross", title="Release notes", slug="release-notes", content="v1",
                category="News", status="published", parent_id="root",
                created_at=now - timedelta(hours=3), updated_at=now - timedelta(hours=3)),
        Article(id="orphan", title="Lost page", slug="lost-page", content="foo",
                category=None, status="draft", parent_id="deleted-long-ago",
                created_at=now - timedelta(hours=2), updated_at=now - timedelta(hours=2)),
    ]
    for a in articles:
        session.add(a)
    session.commit()
    session.close()
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def _ids(nodes):
    return [n["id"] for n in nodes]


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "service": "folio"}


def test_tree(client):
    data = client.get("/api/articles/tree").json()
    assert data["count"] == 4
    assert _ids(data["roots"]) == ["orphan", "root"]
    root = data["roots"][1]
    assert _ids(root["children"]) == ["cross", "child"]
    assert data["categories"] == ["News", "Guides"]


def test_categorized(client):
    data = client.get("/api/articles/categorized").json()
    by_name = {c["name"]: c for c in data["categories"]}
    assert [c["name"] for c in data["categories"]][0] == "Guides"
    assert _ids(by_name["Guides"]["articles"]) == ["root"]
    assert _ids(by_name["Guides"]["articles"][0]["children"]) == ["child"]
    # parent lives in Guides, so the News article is a News root
    assert _ids(by_name["News"]["articles"]) == ["cross"]
    assert by_name["News"]["articles"][0]["children"] == []
    assert _ids(by_name["Uncategorized"]["articles"]) == ["orphan"]


def test_table_lists_roots_only(client):
    data = client.get("/api/articles").json()
    assert _ids(data["items"]) == ["orphan", "root"]
    assert data["total"] == 2
    assert data["total_pages"] == 1
    root = next(i for i in data["items"] if i["id"] == "root")
    assert root["child_count"] == 2


def test_table_filters(client):
    data = client.get("/api/articles", params={"q": "FOO", "status": "draft"}).json()
    assert _ids(data["items"]) == ["orphan"]
    data = client.get("/api/articles", params={"category": "Guides"}).json()
    assert _ids(data["items"]) == ["root"]


def test_table_no_matches(client):
    data = client.get("/api/articles", params={"q": "nothing", "status": "published"}).json()
    assert data["items"] == []
    assert data["total_pages"] == 0


def test_table_clamps_page(client):
    data = client.get("/api/articles", params={"page": 40, "page_size": 5}).json()
    assert data["page"] == 1
    assert len(data["items"]) == 2


def test_table_rejects_odd_page_size(client):
    assert client.get("/api/articles", params={"page_size": 7}).status_code == 422


def test_get_article(client):
    resp = client.get("/api/articles/child")
    assert resp.status_code == 200
    assert resp.json()["parent_id"] == "root"
    assert client.get("/api/articles/nope").status_code == 404


def test_create_article(client):
    resp = client.post("/api/articles", json={"title": "New Page!", "parent_id": "root", "category": "Guides"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["slug"] == "new-page"
    assert body["status"] == "draft"
    tree = client.get("/api/articles/tree").json()
    root = next(r for r in tree["roots"] if r["id"] == "root")
    assert body["id"] in _ids(root["children"])


def test_create_with_missing_parent_rejected(client):
    resp = client.post("/api/articles", json={"title": "Child", "parent_id": "ghost"})
    assert resp.status_code == 422


def test_update_article(client):
    resp = client.put("/api/articles/child", json={"title": "Installing bar"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Installing bar"
    assert resp.json()["parent_id"] == "root"


def test_move_under_descendant_rejected(client):
    resp = client.put("/api/articles/root", json={"parent_id": "child"})
    assert resp.status_code == 422


def test_status_change(client):
    resp = client.patch("/api/articles/child/status", json={"status": "published"})
    assert resp.status_code == 200
    assert resp.json()["published_at"] is not None
    resp = client.patch("/api/articles/child/status", json={"status": "archived"})
    assert resp.status_code == 422


def test_delete_parent_keeps_children(client):
    assert client.delete("/api/articles/root").status_code == 204
    tree = client.get("/api/articles/tree").json()
    assert sorted(_ids(tree["roots"])) == ["child", "cross", "orphan"]
    assert client.delete("/api/articles/root").status_code == 404


def test_stats(client):
    assert client.get("/api/articles/stats").json() == {"total": 4, "categories": 2, "recent": 4}


def test_categories(client):
    data = client.get("/api/categories").json()
    assert [(c["name"], c["count"]) for c in data] == [("Guides", 2), ("News", 1), ("Uncategorized", 1)]


def test_rename_and_delete_category(client):
    resp = client.put("/api/categories/News", json={"name": "Updates"})
    assert resp.json() == {"name": "Updates", "updated": 1}
    assert client.get("/api/articles/cross").json()["category"] == "Updates"
    assert client.put("/api/categories/Missing", json={"name": "X"}).status_code == 404
    assert client.delete("/api/categories/Updates").json()["updated"] == 1
    assert client.get("/api/articles/cross").json()["category"] is None


def test_media_endpoints(client):
    payload = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode()
    resp = client.post("/api/media", json={"filename": "logo.png", "mime_type": "image/png", "data": payload})
    assert resp.status_code == 201
    media_id = resp.json()["id"]
    assert _ids(client.get("/api/media").json()) == [media_id]
    assert client.get(f"/api/media/{media_id}").json()["name"] == "logo"
    assert client.delete(f"/api/media/{media_id}").status_code == 204
    assert client.get(f"/api/media/{media_id}").status_code == 404


def test_media_rejects_non_image(client):
    payload = "data:text/plain;base64," + base64.b64encode(b"hi").decode()
    resp = client.post("/api/media", json={"filename": "a.txt", "mime_type": "text/plain", "data": payload})
    assert resp.status_code == 422


def test_uncategorized_can_be_renamed_and_cleared(client):
    # the orphan has no category at all; clearing it changes nothing
    resp = client.delete("/api/categories/Uncategorized")
    assert resp.status_code == 200
    assert resp.json() == {"name": "Uncategorized", "updated": 0}

    resp = client.put("/api/categories/Uncategorized", json={"name": "Inbox"})
    assert resp.status_code == 200
    assert resp.json() == {"name": "Inbox", "updated": 1}
    assert client.get("/api/articles/orphan").json()["category"] == "Inbox"
    names = [c["name"] for c in client.get("/api/categories").json()]
    assert "Uncategorized" not in names
    assert "Inbox" in names

    assert client.put("/api/categories/Uncategorized", json={"name": "X"}).status_code == 404


def test_tree_endpoints_serve_deep_chains(client):
    session = get_session()
    now = datetime.utcnow()
    depth = 2000
    session.add_all(
        Article(id=f"deep-{i}", title=f"Level {i}", slug=f"level-{i}", category="Deep",
                parent_id=f"deep-{i - 1}" if i else None, created_at=now + timedelta(seconds=i))
        for i in range(depth)
    )
    session.commit()
    session.close()

    resp = client.get("/api/articles/tree")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json"
    assert resp.text.startswith('{"count": 2004, ')
    assert resp.text.count('"id": "deep-') == depth

    resp = client.get("/api/articles/categorized")
    assert resp.status_code == 200
    assert resp.text.startswith('{"categories": [{"name": "Deep", "count": 2000, "articles": [{"id": "deep-0", ')
    assert resp.text.count('"id": "deep-') == depth
