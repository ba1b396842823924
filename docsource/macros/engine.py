"""Locate macro placeholders in text and substitute their computed values.

A placeholder is ``{{Name}}`` or ``{{Name(arguments)}}``. Registered macros are
invoked with the literal arguments parsed by :func:`parse_args`; unknown names
are left verbatim. While scanning, macros that imply a navigation sidebar are
recorded as a :class:`SidebarVariant` on the expansion metadata.

Example
-------
>>> from docsource.macros import MacroEngine, MacroRegistry
>>> engine = MacroEngine(MacroRegistry({"Hi": lambda name="": f"hi {name}"}))
>>> engine.expand('{{Hi("you")}} {{Nope}}').content
'hi you {{Nope}}'
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import types
import typing as typ

from .arguments import MacroArgument, parse_args

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

MacroFunction: typ.TypeAlias = "cabc.Callable[..., object]"

OPEN = "{{"
CLOSE = "}}"
ARGS_CLOSE = ")}}"


class SidebarVariant(enum.StrEnum):
    """Navigation sidebar a document should render with."""

    CSS_REF = "CSSRef"
    JS_SIDEBAR = "JsSidebar"
    JS_REF = "JSRef"


SIDEBAR_MACROS: typ.Mapping[str, SidebarVariant] = types.MappingProxyType(
    {
        "CSSRef": SidebarVariant.CSS_REF,
        "JsSidebar": SidebarVariant.JS_SIDEBAR,
        "jsSidebar": SidebarVariant.JS_SIDEBAR,
        "JSRef": SidebarVariant.JS_REF,
    }
)


@dc.dataclass(frozen=True, slots=True)
class MacroInvocation:
    """A placeholder located in source text.

    Attributes
    ----------
    text : str
        The literal matched span, braces included.
    name : str
        Macro identifier.
    arguments : str | None
        Raw text between the parentheses, or ``None`` when absent.
    """

    text: str
    name: str
    arguments: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Found:
    """Registry lookup hit."""

    function: MacroFunction


@dc.dataclass(frozen=True, slots=True)
class NotFound:
    """Registry lookup miss."""

    name: str


class MacroRegistry:
    """Read-only table of macro functions keyed by name."""

    def __init__(self, functions: typ.Mapping[str, MacroFunction]) -> None:
        self._functions = types.MappingProxyType(dict(functions))

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def names(self) -> list[str]:
        """Return registered macro names in sorted order."""
        return sorted(self._functions)

    def lookup(self, name: str) -> Found | NotFound:
        """Return ``Found`` with the macro function, or ``NotFound``."""
        function = self._functions.get(name)
        if function is None:
            return NotFound(name)
        return Found(function)


@dc.dataclass(frozen=True, slots=True)
class MacroFailure:
    """A macro invocation that raised or returned a non-string value."""

    text: str
    name: str
    reason: str


@dc.dataclass(slots=True)
class ExpansionMetadata:
    """Side-channel data gathered while expanding macros."""

    sidebar: SidebarVariant | None = None


@dc.dataclass(slots=True)
class MacroExpansion:
    """Expanded text with gathered metadata and per-invocation failures."""

    content: str
    metadata: ExpansionMetadata = dc.field(default_factory=ExpansionMetadata)
    failures: list[MacroFailure] = dc.field(default_factory=list)


def _is_identifier_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def _scan_invocation(text: str, start: int) -> MacroInvocation | None:
    """Return the invocation opening at ``start`` or ``None`` if malformed."""
    index = start + len(OPEN)
    name_end = index
    while name_end < len(text) and _is_identifier_char(text[name_end]):
        name_end += 1
    if name_end == index:
        return None
    name = text[index:name_end]
    if text.startswith(CLOSE, name_end):
        end = name_end + len(CLOSE)
        return MacroInvocation(text=text[start:end], name=name)
    if not text.startswith("(", name_end):
        return None
    close = text.find(ARGS_CLOSE, name_end + 1)
    if close == -1:
        return None
    arguments = text[name_end + 1 : close]
    if "{" in arguments:
        return None
    end = close + len(ARGS_CLOSE)
    return MacroInvocation(text=text[start:end], name=name, arguments=arguments)


def find_invocations(text: str) -> list[MacroInvocation]:
    """Return every non-overlapping macro placeholder in ``text`` in order."""
    found: list[MacroInvocation] = []
    position = text.find(OPEN)
    while position != -1:
        invocation = _scan_invocation(text, position)
        if invocation is None:
            position = text.find(OPEN, position + 1)
            continue
        found.append(invocation)
        position = text.find(OPEN, position + len(invocation.text))
    return found


class MacroEngine:
    """Expand macro placeholders using a :class:`MacroRegistry`."""

    def __init__(
        self,
        registry: MacroRegistry,
        *,
        sidebars: typ.Mapping[str, SidebarVariant] = SIDEBAR_MACROS,
    ) -> None:
        """Initialize the engine.

        Parameters
        ----------
        registry : MacroRegistry
            Macro functions available for substitution. Functions must be pure:
            identical placeholders are replaced together.
        sidebars : Mapping[str, SidebarVariant], optional
            Macro names that signal a sidebar variant.
        """
        self.registry = registry
        self.sidebars = sidebars

    def expand(self, text: str) -> MacroExpansion:
        """Return ``text`` with every resolvable placeholder substituted.

        Unknown macros and failing invocations keep their literal text. Each
        distinct placeholder is replaced everywhere it occurs in one step.
        """
        expansion = MacroExpansion(content=text)
        for invocation in find_invocations(text):
            result = self._evaluate(invocation, expansion.failures)
            if result != invocation.text:
                expansion.content = expansion.content.replace(invocation.text, result)
            sidebar = self.sidebars.get(invocation.name)
            if sidebar is not None:
                expansion.metadata.sidebar = sidebar
        return expansion

    def _evaluate(
        self, invocation: MacroInvocation, failures: list[MacroFailure]
    ) -> str:
        """Return the substitution for ``invocation``, recording failures."""
        match self.registry.lookup(invocation.name):
            case NotFound():
                return invocation.text
            case Found(function=function):
                args: list[MacroArgument] = (
                    parse_args(invocation.arguments)
                    if invocation.arguments is not None
                    else []
                )
                try:
                    result = function(*args)
                except Exception as exc:  # noqa: BLE001 - isolate macro faults
                    reason = f"{type(exc).__name__}: {exc}"
                else:
                    if isinstance(result, str):
                        return result
                    reason = f"returned {type(result).__name__}, expected str"
        logger.warning("macro %s failed: %s", invocation.text, reason)
        failures.append(
            MacroFailure(text=invocation.text, name=invocation.name, reason=reason)
        )
        return invocation.text


__all__ = [
    "SIDEBAR_MACROS",
    "ExpansionMetadata",
    "Found",
    "MacroEngine",
    "MacroExpansion",
    "MacroFailure",
    "MacroFunction",
    "MacroInvocation",
    "MacroRegistry",
    "NotFound",
    "SidebarVariant",
    "find_invocations",
]
