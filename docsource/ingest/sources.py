"""Locate, classify, and split documentation source files."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import frontmatter
import yaml

from docsource.errors import DocumentParseError

from .models import SourceFormat

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

FORMAT_SUFFIXES: typ.Mapping[str, SourceFormat] = {
    ".html": SourceFormat.HTML,
    ".htm": SourceFormat.HTML,
    ".md": SourceFormat.MARKDOWN,
    ".markdown": SourceFormat.MARKDOWN,
}
UNROUTABLE_CHARACTERS = frozenset("()")


@dc.dataclass(slots=True)
class FrontMatter:
    """Metadata block and body text of a source file."""

    metadata: dict[str, typ.Any]
    body: str


def walk(root: Path) -> cabc.Iterator[Path]:
    """Yield every regular file below ``root`` in sorted order."""
    for path in sorted(root.rglob("*")):
        if path.is_file():
            yield path


def classify(path: Path) -> SourceFormat | None:
    """Return the format of ``path`` or ``None`` when it is not ingestible.

    Paths containing parentheses cannot be routed and are never eligible.
    """
    if UNROUTABLE_CHARACTERS.intersection(str(path)):
        return None
    return FORMAT_SUFFIXES.get(path.suffix.lower())


def split_front_matter(raw: bytes) -> FrontMatter:
    """Split raw file bytes into front-matter metadata and body text.

    Files without a front-matter block yield empty metadata.

    Raises
    ------
    DocumentParseError
        If the bytes are not UTF-8 or the metadata block is not valid YAML.
    """
    try:
        post = frontmatter.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, yaml.YAMLError, ValueError, TypeError) as exc:
        msg = f"could not read front matter: {exc}"
        raise DocumentParseError(msg) from exc
    return FrontMatter(metadata=dict(post.metadata), body=post.content)


__all__ = [
    "FORMAT_SUFFIXES",
    "FrontMatter",
    "classify",
    "split_front_matter",
    "walk",
]
