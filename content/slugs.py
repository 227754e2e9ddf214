"""URL slug generation for article titles."""

import re

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str | None) -> str:
    """Lowercase `title` and join runs of letters/digits with single dashes.

    Non-ASCII characters are dropped, so a title with none of [a-z0-9] gives "".
    """
    slug = _NON_SLUG.sub("-", (title or "").lower())
    return slug.strip("-")
