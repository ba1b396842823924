"""Parse HTML fragments, anchor their headings, and render them back.

The tree produced by :meth:`HtmlProcessor.parse` is enriched and read for
headings in place, so each document is parsed exactly once.

Example
-------
>>> from docsource.processors import HtmlProcessor
>>> document = HtmlProcessor().process("<h2>Intro</h2><p>Body</p>")
>>> document.markup
'<h2 id="intro"><a href="#intro">Intro</a></h2><p>Body</p>'
>>> document.headings[0].anchor
'intro'
"""

from __future__ import annotations

import dataclasses as dc

from bs4 import BeautifulSoup, Tag

from docsource.errors import DocumentParseError

from .headings import HEADING_TAG_PATTERN, Heading, extract_headings
from .slugs import Slugger

PARSER = "html.parser"


@dc.dataclass(slots=True)
class RenderedDocument:
    """Rendered markup and the heading index read from the same tree."""

    markup: str
    headings: list[Heading]


def _is_self_link(heading: Tag, anchor: str) -> bool:
    """Return True when ``heading`` already wraps its content in ``#anchor``."""
    children = [
        child
        for child in heading.contents
        if isinstance(child, Tag) or str(child).strip()
    ]
    return (
        len(children) == 1
        and isinstance(children[0], Tag)
        and children[0].name == "a"
        and children[0].get("href") == f"#{anchor}"
    )


class HtmlProcessor:
    """Heading-anchoring pipeline for HTML document bodies."""

    def parse(self, text: str) -> BeautifulSoup:
        """Parse ``text`` as an HTML fragment."""
        try:
            return BeautifulSoup(text, PARSER)
        except Exception as exc:  # noqa: BLE001 - surface as a parse failure
            msg = f"could not parse HTML: {exc}"
            raise DocumentParseError(msg) from exc

    def assign_ids(self, tree: BeautifulSoup) -> list[Tag]:
        """Give every heading lacking an id a unique slug and return the headings.

        Existing ids are kept and reserved so generated slugs never collide
        with them.
        """
        headings = tree.find_all(HEADING_TAG_PATTERN)
        slugger = Slugger()
        for heading in headings:
            if heading.get("id"):
                slugger.reserve(str(heading["id"]))
        for heading in headings:
            if not heading.get("id"):
                heading["id"] = slugger.slug(heading.get_text())
        return list(headings)

    def enrich(self, tree: BeautifulSoup) -> BeautifulSoup:
        """Give every heading an id and wrap its content in a self-link.

        Headings already wrapped in their self-link are left alone.
        """
        for heading in self.assign_ids(tree):
            anchor = str(heading["id"])
            if _is_self_link(heading, anchor):
                continue
            link = tree.new_tag("a", href=f"#{anchor}")
            for child in list(heading.contents):
                link.append(child.extract())
            heading.append(link)
        return tree

    def render(self, tree: BeautifulSoup) -> str:
        """Serialize ``tree`` back to markup."""
        return str(tree)

    def process(self, text: str) -> RenderedDocument:
        """Parse, enrich, extract headings from, and render ``text``."""
        tree = self.enrich(self.parse(text))
        return RenderedDocument(markup=self.render(tree), headings=extract_headings(tree))


__all__ = ["PARSER", "HtmlProcessor", "RenderedDocument"]
