#!/usr/bin/env python3
"""Backfill slugs for articles saved without one."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from content.slugs import generate_slug
from db.database import get_session, init_db
from db.models import Article

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def backfill() -> int:
    """Fill empty slugs from titles. Returns the number of articles updated."""
    session = get_session()
    try:
        articles = session.query(Article).filter((Article.slug == "") | (Article.slug.is_(None))).all()
        logger.info("Backfilling slugs for %d articles", len(articles))

        updated = 0
        for article in articles:
            slug = generate_slug(article.title)
            if slug:
                article.slug = slug
                updated += 1
            else:
                logger.warning("Article %s title %r yields an empty slug", article.id, article.title)

        session.commit()
        logger.info("Updated %d articles (of %d without slug)", updated, len(articles))
        return updated
    finally:
        session.close()


def main() -> None:
    init_db()
    backfill()


if __name__ == "__main__":
    main()
