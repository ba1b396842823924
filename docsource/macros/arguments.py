r"""Tokenize the argument list of a macro invocation into literal values.

Arguments are found by scanning rather than by splitting on commas, so stray
separators between tokens are ignored. Each candidate token resolves to a
string, an integer, or :data:`UNDEFINED` when it matches no literal form.

Example
-------
>>> from docsource.macros.arguments import parse_args
>>> parse_args("'x', 5, ''")
['x', 5, '']
>>> parse_args("??")
[UNDEFINED]
"""

from __future__ import annotations

import typing as typ

SEPARATORS = frozenset(", \t\r\n")
QUOTES = frozenset("\"'")


class Undefined:
    """Marker passed to macros for arguments that match no literal form."""

    _instance: Undefined | None = None

    def __new__(cls) -> Undefined:
        """Return the shared marker instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined()

MacroArgument: typ.TypeAlias = str | int | Undefined


def _read_quoted(text: str, start: int) -> tuple[MacroArgument, int]:
    """Read a quoted literal beginning at ``start``.

    Returns the interior text and the index after the closing quote. An
    unterminated quote consumes the rest of the string as an undefined token.
    """
    quote = text[start]
    end = text.find(quote, start + 1)
    if end == -1:
        return UNDEFINED, len(text)
    return text[start + 1 : end], end + 1


def _read_bare(text: str, start: int) -> tuple[MacroArgument, int]:
    """Read an unquoted candidate up to the next separator."""
    end = start
    while end < len(text) and text[end] not in SEPARATORS:
        end += 1
    token = text[start:end]
    if token.isascii() and token.isdigit():
        return int(token, 10), end
    return UNDEFINED, end


def parse_args(argument_string: str) -> list[MacroArgument]:
    """Return the literal values found in a macro argument string.

    Parameters
    ----------
    argument_string : str
        Raw text between the parentheses of ``{{Name(...)}}``; may be empty.

    Returns
    -------
    list[MacroArgument]
        One value per candidate token, in order. Double- and single-quoted
        strings yield their interior text (``''`` and ``""`` yield ``""``),
        digit runs yield base-10 integers, and anything else yields
        :data:`UNDEFINED` so argument positions stay stable.
    """
    values: list[MacroArgument] = []
    index = 0
    length = len(argument_string)
    while index < length:
        char = argument_string[index]
        if char in SEPARATORS:
            index += 1
            continue
        if char in QUOTES:
            value, index = _read_quoted(argument_string, index)
        else:
            value, index = _read_bare(argument_string, index)
        values.append(value)
    return values


__all__ = ["UNDEFINED", "MacroArgument", "Undefined", "parse_args"]
