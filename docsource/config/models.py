"""Typed dataclasses describing ingestion configuration."""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

DEFAULT_LOCALE = "en-US"
DEFAULT_OUTPUT = Path("public/content.json")
DEFAULT_TIMEOUT = 30.0
DEFAULT_WORKERS = min(32, (os.cpu_count() or 1) + 4)


class IngestConfigError(ValueError):
    """Raised when the ingest configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class LinkConfig:
    """Attributes applied to links that leave the site."""

    target: str = "_blank"
    rel: list[str] = dc.field(default_factory=lambda: ["noopener", "noreferrer"])


@dc.dataclass(slots=True)
class IngestConfig:
    """A fully resolved ingestion run definition.

    Attributes
    ----------
    source_root : Path
        Directory walked for HTML and Markdown sources.
    locale : str
        Locale prefix of every routed path.
    output : Path
        Where the collected records are written as JSON.
    timeout : float
        Seconds allowed for processing a single file.
    macros : dict[str, str]
        Macro name to Jinja template source, merged over the built-ins.
    external_links : LinkConfig
        Attributes for off-site links in Markdown documents.
    pygments_style : str
        Pygments style for fenced code in Markdown documents.
    workers : int
        Worker threads reading and rendering files; also the number of
        files whose timeout clock may run at once.
    """

    source_root: Path
    locale: str = DEFAULT_LOCALE
    output: Path = DEFAULT_OUTPUT
    timeout: float = DEFAULT_TIMEOUT
    macros: dict[str, str] = dc.field(default_factory=dict)
    external_links: LinkConfig = dc.field(default_factory=LinkConfig)
    pygments_style: str = "monokai"
    workers: int = DEFAULT_WORKERS


__all__ = [
    "DEFAULT_LOCALE",
    "DEFAULT_OUTPUT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WORKERS",
    "IngestConfig",
    "IngestConfigError",
    "LinkConfig",
]
