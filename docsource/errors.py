"""Exceptions raised while turning a source file into a content record."""

from __future__ import annotations


class DocumentParseError(ValueError):
    """Raised when a document body cannot be parsed or rendered."""


class MissingRoutingFieldError(KeyError):
    """Raised when front matter lacks a field needed to route the document."""

    def __init__(self, field: str) -> None:
        super().__init__(field)
        self.field = field

    def __str__(self) -> str:
        return f"front matter is missing required field '{self.field}'"


__all__ = ["DocumentParseError", "MissingRoutingFieldError"]
