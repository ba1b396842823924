"""Records and outcomes produced by an ingestion run."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from docsource.macros import MacroFailure, SidebarVariant
    from docsource.processors import Heading


class SourceFormat(enum.StrEnum):
    """Source formats understood by the ingestor."""

    HTML = "html"
    MARKDOWN = "markdown"


class SkipReason(enum.StrEnum):
    """Why an eligible file produced no record."""

    PARSE_FAILURE = "parse-failure"
    MISSING_ROUTING_FIELD = "missing-routing-field"
    IO_FAILURE = "io-failure"
    TIMEOUT = "timeout"


@dc.dataclass(frozen=True, slots=True)
class ContentRecord:
    """A normalized document handed to the content collection.

    Attributes
    ----------
    path : str
        Routed path, ``/{locale}/docs/{slug}``.
    content : str
        Rendered markup with macros expanded.
    headings : tuple[Heading, ...]
        Heading index in document order.
    front_matter : Mapping[str, Any]
        Front-matter fields passed through unchanged.
    sidebar : SidebarVariant | None
        Sidebar signalled by the document's macros.
    source : Path | None
        File the record was built from.
    """

    path: str
    content: str
    headings: tuple[Heading, ...]
    front_matter: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    sidebar: SidebarVariant | None = None
    source: Path | None = None

    def as_node(self) -> dict[str, typ.Any]:
        """Return the collection payload for this record."""
        node: dict[str, typ.Any] = {
            "content": self.content,
            "headings": [heading.as_dict() for heading in self.headings],
            **self.front_matter,
            "path": self.path,
        }
        if self.sidebar is not None:
            node["hasSidebar"] = str(self.sidebar)
        return node


@dc.dataclass(frozen=True, slots=True)
class SkippedFile:
    """An eligible file that was not turned into a record."""

    path: Path
    reason: SkipReason
    detail: str = ""


@dc.dataclass(frozen=True, slots=True)
class FileMacroFailure:
    """A macro failure attributed to the file it occurred in."""

    path: Path
    failure: MacroFailure


@dc.dataclass(slots=True)
class IngestReport:
    """Summary of an ingestion run."""

    records: list[ContentRecord] = dc.field(default_factory=list)
    skipped: list[SkippedFile] = dc.field(default_factory=list)
    ineligible: int = 0
    macro_failures: list[FileMacroFailure] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when every eligible file produced a record."""
        return not self.skipped

    def summary(self) -> str:
        """Return a one-line count of ingested, skipped, and ineligible files."""
        return (
            f"ingested {len(self.records)}, skipped {len(self.skipped)}, "
            f"ineligible {self.ineligible}"
        )


__all__ = [
    "ContentRecord",
    "FileMacroFailure",
    "IngestReport",
    "SkipReason",
    "SkippedFile",
    "SourceFormat",
]
