"""API routes for folio."""

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from api.schemas import ArticleCreate, ArticleUpdate, CategoryRename, MediaUpload, StatusChange
from config import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from content.formatting import format_relative_time
from hierarchy.builder import build_categorized_forest, build_root_tree, category_options, count_nodes
from hierarchy.filtering import ALL, ArticleFilter, paginate
from hierarchy.records import ArticleRecord, TreeNode, tree_to_json
from repository.articles import ArticleRepository
from repository.errors import ArticleNotFound, MediaNotFound
from repository.media import MediaLibrary

router = APIRouter(prefix="/api")


def get_articles(request: Request) -> ArticleRepository:
    return request.app.state.articles


def get_media(request: Request) -> MediaLibrary:
    return request.app.state.media


def _serialize_row(node: TreeNode) -> dict[str, Any]:
    """Table row: the root article plus how many direct children it has."""
    data = _serialize(node.article)
    data["child_count"] = len(node.children)
    return data


def _serialize(article: ArticleRecord) -> dict[str, Any]:
    data = article.to_dict()
    data["updated_label"] = format_relative_time(article.updated_at) if article.updated_at else None
    return data


@router.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok", "service": "folio"}


@router.get("/articles")
def list_articles(
    q: str = Query(default=""),
    category: str = Query(default=ALL),
    status_filter: str = Query(default=ALL, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE),
    articles: ArticleRepository = Depends(get_articles),
) -> dict[str, Any]:
    """Table view: filter the root-level articles and return one page."""
    if page_size not in PAGE_SIZE_OPTIONS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=f"page_size must be one of {', '.join(map(str, PAGE_SIZE_OPTIONS))}",
        )
    records = articles.list_all()
    roots = ArticleFilter(query=q, category=category, status=status_filter).apply(build_root_tree(records))
    result = paginate(roots, page, page_size)
    return {
        "items": [_serialize_row(node) for node in result.items],
        "page": result.page,
        "page_size": result.page_size,
        "total": result.total,
        "total_pages": result.total_pages,
        "categories": category_options(records),
    }


def _json_with_trees(envelope: dict[str, Any], **trees: list[TreeNode]) -> Response:
    """`envelope` as JSON with each tree spliced in as an extra key.

    Trees are encoded by `tree_to_json`; `jsonable_encoder` and `json.dumps`
    would recurse once per level.
    """
    parts = [json.dumps(envelope)[:-1]]
    for key, roots in trees.items():
        parts.append(f", {json.dumps(key)}: {tree_to_json(roots)}")
    parts.append("}")
    return Response(content="".join(parts), media_type="application/json")


@router.get("/articles/tree")
def get_tree(articles: ArticleRepository = Depends(get_articles)) -> Response:
    """All articles as a root-level tree."""
    records = articles.list_all()
    tree = build_root_tree(records)
    return _json_with_trees(
        {"count": count_nodes(tree), "categories": category_options(records)},
        roots=tree,
    )


@router.get("/articles/categorized")
def get_categorized(articles: ArticleRepository = Depends(get_articles)) -> Response:
    """One tree per category, most populous category first."""
    forest = build_categorized_forest(articles.list_all())
    entries = []
    for name, roots in forest.items():
        head = json.dumps({"name": name, "count": count_nodes(roots)})[:-1]
        entries.append(f"{head}, \"articles\": {tree_to_json(roots)}}}")
    return Response(content='{"categories": [' + ", ".join(entries) + "]}", media_type="application/json")


@router.get("/articles/stats")
def get_stats(articles: ArticleRepository = Depends(get_articles)) -> dict[str, int]:
    return articles.stats()


@router.get("/articles/{article_id}")
def get_article(article_id: str, articles: ArticleRepository = Depends(get_articles)) -> dict[str, Any]:
    article = articles.get(article_id)
    if article is None:
        raise ArticleNotFound(article_id)
    return _serialize(article)


@router.post("/articles", status_code=status.HTTP_201_CREATED)
def create_article(body: ArticleCreate, articles: ArticleRepository = Depends(get_articles)) -> dict[str, Any]:
    fields = body.model_dump(exclude={"title"})
    return _serialize(articles.create(body.title, **fields))


@router.put("/articles/{article_id}")
def update_article(
    article_id: str,
    body: ArticleUpdate,
    articles: ArticleRepository = Depends(get_articles),
) -> dict[str, Any]:
    return _serialize(articles.update(article_id, **body.model_dump(exclude_unset=True)))


@router.patch("/articles/{article_id}/status")
def change_status(
    article_id: str,
    body: StatusChange,
    articles: ArticleRepository = Depends(get_articles),
) -> dict[str, Any]:
    return _serialize(articles.update_status(article_id, body.status))


@router.delete("/articles/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_article(article_id: str, articles: ArticleRepository = Depends(get_articles)) -> Response:
    articles.delete(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories")
def list_categories(articles: ArticleRepository = Depends(get_articles)) -> list[dict[str, Any]]:
    """Category names with article counts, most populous first."""
    summary = articles.category_summary()
    for entry in summary:
        latest = entry.pop("latest_created_at")
        entry["latest_created_at"] = latest.isoformat() if latest else None
    return summary


@router.put("/categories/{name}")
def rename_category(
    name: str,
    body: CategoryRename,
    articles: ArticleRepository = Depends(get_articles),
) -> dict[str, Any]:
    changed = articles.rename_category(name, body.name)
    if not changed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category {name!r} not found")
    return {"name": body.name.strip(), "updated": changed}


@router.delete("/categories/{name}")
def delete_category(name: str, articles: ArticleRepository = Depends(get_articles)) -> dict[str, Any]:
    """Articles in the category become uncategorized; the articles themselves are kept."""
    return {"name": name, "updated": articles.clear_category(name)}


@router.get("/media")
def list_media(media: MediaLibrary = Depends(get_media)) -> list[dict[str, Any]]:
    return media.list_all()


@router.post("/media", status_code=status.HTTP_201_CREATED)
def upload_media(body: MediaUpload, media: MediaLibrary = Depends(get_media)) -> dict[str, Any]:
    return media.upload(body.filename, body.mime_type, body.data, width=body.width, height=body.height)


@router.get("/media/{media_id}")
def get_media_file(media_id: str, media: MediaLibrary = Depends(get_media)) -> dict[str, Any]:
    item = media.get(media_id)
    if item is None:
        raise MediaNotFound(media_id)
    return item


@router.delete("/media/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_media(media_id: str, media: MediaLibrary = Depends(get_media)) -> Response:
    media.delete(media_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
