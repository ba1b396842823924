"""Format processors turning HTML or Markdown bodies into anchored markup."""

from .headings import Heading, extract_headings
from .html_processor import HtmlProcessor, RenderedDocument
from .markdown_processor import HeadingEnrichmentExtension, MarkdownProcessor, is_external
from .slugs import Slugger, slugify

__all__ = [
    "Heading",
    "HeadingEnrichmentExtension",
    "HtmlProcessor",
    "MarkdownProcessor",
    "RenderedDocument",
    "Slugger",
    "extract_headings",
    "is_external",
    "slugify",
]
