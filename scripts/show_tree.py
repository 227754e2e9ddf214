#!/usr/bin/env python3
"""CLI to print the article hierarchy."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from db.database import init_db
from hierarchy.browser import ArticleBrowser
from hierarchy.records import TreeNode
from hierarchy.view_state import ExpansionState, category_key
from repository.articles import ArticleRepository


def render(nodes: list[TreeNode], expansion: ExpansionState, depth: int = 0) -> list[str]:
    """Indented lines for `nodes`; children are shown only under expanded nodes."""
    lines: list[str] = []
    stack = [(node, depth) for node in reversed(nodes)]
    while stack:
        node, level = stack.pop()
        if node.children:
            marker = "-" if expansion.is_expanded(node.id) else "+"
        else:
            marker = " "
        article = node.article
        lines.append(f"{'  ' * level}{marker} {article.title} [{article.status}] ({article.id})")
        if node.children and expansion.is_expanded(node.id):
            stack.extend((child, level + 1) for child in reversed(node.children))
    return lines


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the article tree")
    parser.add_argument(
        "--categorized", "-c",
        action="store_true",
        help="Group articles by category",
    )
    parser.add_argument(
        "--expand-all", "-a",
        action="store_true",
        help="Show every level (default: roots only)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    init_db()
    browser = ArticleBrowser(ArticleRepository())
    if not browser.refresh():
        logging.error("Could not load articles: %s", browser.error)
        sys.exit(1)

    if args.categorized:
        if args.expand_all:
            browser.expand_categories()
        for name, roots in browser.forest.items():
            open_ = browser.expansion.is_expanded(category_key(name))
            print(f"{'-' if open_ else '+'} {name} ({len(roots)})")
            if open_:
                print("\n".join(render(roots, browser.expansion, depth=1)))
    else:
        if args.expand_all:
            browser.expand_all()
        for line in render(browser.tree, browser.expansion):
            print(line)

    logging.info("Done. %d root articles, %d categories", len(browser.tree), len(browser.forest))


if __name__ == "__main__":
    main()
