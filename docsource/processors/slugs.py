"""Heading slug generation shared by the HTML and Markdown processors."""

from __future__ import annotations

import re

STRIP_PATTERN = re.compile(r"[^\w\- ]")
FALLBACK_SLUG = "section"


def slugify(text: str) -> str:
    """Return a GitHub-style slug for a heading title.

    Examples
    --------
    >>> slugify("Hello, World!")
    'hello-world'
    >>> slugify("Array.prototype.map()")
    'arrayprototypemap'
    """
    slug = STRIP_PATTERN.sub("", text.strip().lower()).replace(" ", "-")
    return slug or FALLBACK_SLUG


class Slugger:
    """Issue slugs that are unique within one document."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def reserve(self, slug: str) -> None:
        """Mark an id that already exists in the document as taken."""
        self._seen.setdefault(slug, 0)

    def slug(self, text: str) -> str:
        """Return a unique slug for ``text``, suffixing ``-1``, ``-2`` on repeats."""
        base = slugify(text)
        candidate = base
        while candidate in self._seen:
            self._seen[base] += 1
            candidate = f"{base}-{self._seen[base]}"
        self._seen[candidate] = 0
        return candidate


__all__ = ["FALLBACK_SLUG", "Slugger", "slugify"]
