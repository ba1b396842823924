"""Extract an ordered heading index from a parsed markup tree."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

if typ.TYPE_CHECKING:
    from bs4 import Tag

HEADING_TAG_PATTERN = re.compile(r"^h[1-6]$")


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """A heading in document order.

    Attributes
    ----------
    level : int
        Heading level from 1 to 6.
    text : str
        Text content with surrounding whitespace removed.
    anchor : str | None
        The ``id`` assigned by the format processor, if any.
    """

    level: int
    text: str
    anchor: str | None

    def as_dict(self) -> dict[str, typ.Any]:
        """Return the heading as a plain mapping for serialization."""
        return {"depth": self.level, "value": self.text, "anchor": self.anchor}


def extract_headings(tree: Tag) -> list[Heading]:
    """Return the ``h1``-``h6`` elements of ``tree`` as :class:`Heading` entries.

    Anchor ids are read from the elements as assigned during enrichment; none
    are generated here. A tree without headings yields an empty list.
    """
    headings: list[Heading] = []
    for element in tree.find_all(HEADING_TAG_PATTERN):
        anchor = element.get("id")
        headings.append(
            Heading(
                level=int(element.name[1]),
                text=element.get_text().strip(),
                anchor=str(anchor) if anchor else None,
            )
        )
    return headings


__all__ = ["HEADING_TAG_PATTERN", "Heading", "extract_headings"]
