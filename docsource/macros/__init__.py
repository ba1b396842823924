"""Macro expansion for documentation prose.

Exports the argument tokenizer, the expansion engine, and registry builders
used by the ingestion pipeline.
"""

from .arguments import UNDEFINED, MacroArgument, Undefined, parse_args
from .engine import (
    SIDEBAR_MACROS,
    ExpansionMetadata,
    Found,
    MacroEngine,
    MacroExpansion,
    MacroFailure,
    MacroInvocation,
    MacroRegistry,
    NotFound,
    SidebarVariant,
    find_invocations,
)
from .registry import MacroTemplateError, TemplateMacro, build_registry, default_macros

__all__ = [
    "SIDEBAR_MACROS",
    "UNDEFINED",
    "ExpansionMetadata",
    "Found",
    "MacroArgument",
    "MacroEngine",
    "MacroExpansion",
    "MacroFailure",
    "MacroInvocation",
    "MacroRegistry",
    "MacroTemplateError",
    "NotFound",
    "SidebarVariant",
    "TemplateMacro",
    "Undefined",
    "build_registry",
    "default_macros",
    "find_invocations",
    "parse_args",
]
