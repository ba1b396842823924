"""Render Markdown bodies with heading slugs, autolinks, and safe external links.

Python-Markdown builds an ElementTree for each document. Three
treeprocessors registered by :class:`HeadingEnrichmentExtension` run after
inline parsing, in order: heading slugs, external-link annotation, then
heading autolinks. The resulting HTML is parsed once with
:class:`~docsource.processors.HtmlProcessor` so headings are read from the
same HTML shape for both source formats.
"""

from __future__ import annotations

import html
import re
import typing as typ
from urllib.parse import urlsplit
from xml.etree.ElementTree import Element, SubElement

from markdown import Markdown, util
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from docsource.errors import DocumentParseError

from .headings import extract_headings
from .html_processor import HtmlProcessor, RenderedDocument
from .slugs import Slugger

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
ESCAPED_CHAR_PATTERN = re.compile(f"{util.STX}([0-9]+){util.ETX}")
TAG_PATTERN = re.compile(r"<[^>]*>")
DEFAULT_ICON_CLASS = "icon icon-link"
DEFAULT_LINK_TARGET = "_blank"
DEFAULT_LINK_REL: tuple[str, ...] = ("noopener", "noreferrer")


def is_external(href: str | None) -> bool:
    """Return True for absolute http(s) and protocol-relative link targets."""
    if not href:
        return False
    if href.startswith("//"):
        return True
    parsed = urlsplit(href)
    return parsed.scheme.lower() in {"http", "https"} and bool(parsed.netloc)


class HeadingSlugTreeprocessor(Treeprocessor):
    """Assign a unique ``id`` to every heading lacking one."""

    def run(self, root: Element) -> Element:
        """Set heading ids on the parsed markdown tree."""
        slugger = Slugger()
        headings = [element for element in root.iter() if element.tag in HEADING_TAGS]
        for heading in headings:
            if heading.get("id"):
                slugger.reserve(heading.get("id", ""))
        for heading in headings:
            if not heading.get("id"):
                heading.set("id", slugger.slug(self._heading_text(heading)))
        return root

    def _heading_text(self, heading: Element) -> str:
        """Return heading text with stashed HTML and escapes resolved."""
        text = "".join(heading.itertext())

        def _stashed(match: re.Match[str]) -> str:
            index = int(match.group(1))
            blocks = self.md.htmlStash.rawHtmlBlocks
            return str(blocks[index]) if index < len(blocks) else ""

        text = util.HTML_PLACEHOLDER_RE.sub(_stashed, text)
        text = ESCAPED_CHAR_PATTERN.sub(lambda m: chr(int(m.group(1))), text)
        return html.unescape(TAG_PATTERN.sub("", text))


class ExternalLinkTreeprocessor(Treeprocessor):
    """Open off-site links in a new tab without leaking the referrer."""

    def __init__(self, md: Markdown, target: str, rel: typ.Sequence[str]) -> None:
        super().__init__(md)
        self.target = target
        self.rel = " ".join(rel)

    def run(self, root: Element) -> Element:
        """Annotate external anchors in the parsed markdown tree."""
        for element in root.iter("a"):
            if is_external(element.get("href")):
                if self.target:
                    element.set("target", self.target)
                if self.rel:
                    element.set("rel", self.rel)
        return root


class HeadingAutolinkTreeprocessor(Treeprocessor):
    """Wrap heading content in a link to the heading's own id."""

    def __init__(self, md: Markdown, icon_class: str) -> None:
        super().__init__(md)
        self.icon_class = icon_class

    def run(self, root: Element) -> Element:
        """Insert an icon-decorated self-link into every identified heading."""
        for heading in [el for el in root.iter() if el.tag in HEADING_TAGS]:
            anchor = heading.get("id")
            if not anchor:
                continue
            link = Element("a", {"href": f"#{anchor}"})
            icon = SubElement(link, "span", {"class": self.icon_class})
            icon.set("aria-hidden", "true")
            icon.tail = heading.text
            heading.text = None
            for child in list(heading):
                heading.remove(child)
                link.append(child)
            heading.append(link)
        return root


class HeadingEnrichmentExtension(Extension):
    """Register the slug, external-link, and autolink treeprocessors."""

    def __init__(
        self,
        *,
        link_target: str = DEFAULT_LINK_TARGET,
        link_rel: typ.Sequence[str] = DEFAULT_LINK_REL,
        icon_class: str = DEFAULT_ICON_CLASS,
    ) -> None:
        super().__init__()
        self.link_target = link_target
        self.link_rel = tuple(link_rel)
        self.icon_class = icon_class

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the enrichment treeprocessors after inline parsing."""
        md.treeprocessors.register(
            HeadingSlugTreeprocessor(md), "docsource_heading_slugs", 15
        )
        md.treeprocessors.register(
            ExternalLinkTreeprocessor(md, self.link_target, self.link_rel),
            "docsource_external_links",
            14,
        )
        md.treeprocessors.register(
            HeadingAutolinkTreeprocessor(md, self.icon_class),
            "docsource_heading_autolinks",
            13,
        )


class MarkdownProcessor:
    """Render Markdown bodies to anchored HTML and index their headings."""

    def __init__(
        self,
        *,
        pygments_style: str = "monokai",
        link_target: str = DEFAULT_LINK_TARGET,
        link_rel: typ.Sequence[str] = DEFAULT_LINK_REL,
        icon_class: str = DEFAULT_ICON_CLASS,
        html_processor: HtmlProcessor | None = None,
    ) -> None:
        """Initialize the processor.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style applied to fenced code blocks.
        link_target : str, optional
            ``target`` attribute set on external links; empty to skip.
        link_rel : Sequence[str], optional
            ``rel`` tokens set on external links.
        icon_class : str, optional
            CSS classes of the decorative span inside heading autolinks.
        html_processor : HtmlProcessor, optional
            Parser used for the rendered HTML; a default one is created.
        """
        self.pygments_style = pygments_style
        self.link_target = link_target
        self.link_rel = tuple(link_rel)
        self.icon_class = icon_class
        self.html = html_processor or HtmlProcessor()

    def _markdown(self) -> Markdown:
        """Return a fresh Markdown instance; instances hold per-document state."""
        return Markdown(
            extensions=[
                "fenced_code",
                "codehilite",
                "tables",
                "sane_lists",
                HeadingEnrichmentExtension(
                    link_target=self.link_target,
                    link_rel=self.link_rel,
                    icon_class=self.icon_class,
                ),
            ],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )

    def convert(self, text: str) -> str:
        """Render ``text`` to HTML with all enrichment applied."""
        try:
            return self._markdown().convert(text)
        except Exception as exc:  # noqa: BLE001 - surface as a parse failure
            msg = f"could not render Markdown: {exc}"
            raise DocumentParseError(msg) from exc

    def process(self, text: str) -> RenderedDocument:
        """Render ``text`` and read headings from the re-parsed HTML tree.

        Raw HTML headings pass through Markdown untouched, so they receive
        their ids on the re-parsed tree.
        """
        tree = self.html.parse(self.convert(text))
        self.html.assign_ids(tree)
        return RenderedDocument(
            markup=self.html.render(tree), headings=extract_headings(tree)
        )


__all__ = [
    "ExternalLinkTreeprocessor",
    "HeadingAutolinkTreeprocessor",
    "HeadingEnrichmentExtension",
    "HeadingSlugTreeprocessor",
    "MarkdownProcessor",
    "is_external",
]
