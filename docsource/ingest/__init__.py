"""Ingestion of documentation source trees into content records."""

from .collection import ContentCollection
from .ingestor import ROUTE_TEMPLATE, ContentIngestor, build_route
from .models import (
    ContentRecord,
    FileMacroFailure,
    IngestReport,
    SkippedFile,
    SkipReason,
    SourceFormat,
)
from .sources import FrontMatter, classify, split_front_matter, walk

__all__ = [
    "ROUTE_TEMPLATE",
    "ContentCollection",
    "ContentIngestor",
    "ContentRecord",
    "FileMacroFailure",
    "FrontMatter",
    "IngestReport",
    "SkipReason",
    "SkippedFile",
    "SourceFormat",
    "build_route",
    "classify",
    "split_front_matter",
    "walk",
]
