"""Unit tests for macro placeholder scanning and expansion.

The tests build small in-memory registries so expansion behaviour (verbatim
unknown macros, global replacement, sidebar signals, and failure isolation)
can be asserted without the built-in macro table.

Usage
-----
Run ``pytest tests/test_macro_engine.py -v``.
"""

from __future__ import annotations

import typing as typ

import pytest

from docsource.macros import (
    UNDEFINED,
    Found,
    MacroEngine,
    MacroInvocation,
    MacroRegistry,
    NotFound,
    SidebarVariant,
    find_invocations,
)


def _engine(**functions: typ.Callable[..., object]) -> MacroEngine:
    return MacroEngine(MacroRegistry(functions))


def test_find_invocations_with_and_without_arguments() -> None:
    """Both placeholder forms are located in order; spaced braces are not."""
    found = find_invocations("{{A}} text {{B('x', 2)}} {{ C }} {{D()}}")
    assert found == [
        MacroInvocation(text="{{A}}", name="A"),
        MacroInvocation(text="{{B('x', 2)}}", name="B", arguments="'x', 2"),
        MacroInvocation(text="{{D()}}", name="D", arguments=""),
    ], f"unexpected invocations {found!r}"


def test_arguments_end_at_first_closing_sequence() -> None:
    """Argument text runs to the first ``)}}``."""
    found = find_invocations('{{A("x)")}} and {{B}}')
    assert [item.name for item in found] == ["A", "B"]
    assert found[0].arguments == '"x)"'


def test_arguments_containing_braces_are_not_invocations() -> None:
    """A ``{`` inside the argument text disqualifies the placeholder."""
    assert find_invocations("{{A({x})}}") == []


def test_registry_lookup_is_tagged() -> None:
    """Lookups return Found for registered names and NotFound otherwise."""
    registry = MacroRegistry({"A": str})
    assert isinstance(registry.lookup("A"), Found)
    assert registry.lookup("B") == NotFound("B")
    assert "A" in registry
    assert len(registry) == 1
    assert registry.names() == ["A"]


def test_unknown_macro_left_verbatim() -> None:
    """Unregistered macros remain in the output text."""
    expansion = _engine().expand("before {{Nope}} after")
    assert expansion.content == "before {{Nope}} after"
    assert expansion.failures == []


def test_zero_argument_invocation() -> None:
    """Placeholders without parentheses call the macro with no arguments."""
    expansion = _engine(Year=lambda: "2024").expand("(c) {{Year}}")
    assert expansion.content == "(c) 2024"


def test_empty_parentheses_call_with_no_arguments() -> None:
    """Empty parentheses also call the macro with no arguments."""
    expansion = _engine(Year=lambda: "2024").expand("{{Year()}}")
    assert expansion.content == "2024"


def test_arguments_are_spread_positionally() -> None:
    """Parsed arguments, including UNDEFINED, reach the macro in order."""
    seen: list[tuple[object, ...]] = []

    def record(*args: object) -> str:
        seen.append(args)
        return "ok"

    expansion = _engine(Record=record).expand("{{Record(\"a\", 'b', 3, ??)}}")
    assert expansion.content == "ok"
    assert seen == [("a", "b", 3, UNDEFINED)], f"unexpected arguments {seen!r}"


def test_identical_placeholders_replaced_together() -> None:
    """Every occurrence of a placeholder is replaced with the same value."""
    expansion = _engine(Name=lambda: "MDN").expand("{{Name}} and {{Name}}")
    assert expansion.content == "MDN and MDN"


def test_expansion_is_idempotent_on_expanded_text() -> None:
    """Expanding already-expanded text changes nothing."""
    engine = _engine(Greet=lambda who: f"Hello {who}")
    once = engine.expand('<p>{{Greet("reader")}}</p>').content
    twice = engine.expand(once).content
    assert once == "<p>Hello reader</p>"
    assert twice == once, "second expansion should be a no-op"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("{{JSRef}}", SidebarVariant.JS_REF),
        ("{{CSSRef()}}", SidebarVariant.CSS_REF),
        ("{{jsSidebar('Statements')}}", SidebarVariant.JS_SIDEBAR),
        ("{{JsSidebar}}", SidebarVariant.JS_SIDEBAR),
        ("{{unknownFn}}", None),
    ],
)
def test_sidebar_signal(text: str, expected: SidebarVariant | None) -> None:
    """Sidebar macros set the signal whether or not they are registered."""
    expansion = _engine().expand(text)
    assert expansion.metadata.sidebar == expected, (
        f"expected sidebar {expected!r} for {text}"
    )


def test_last_sidebar_wins() -> None:
    """When several sidebar macros appear, the last one is kept."""
    expansion = _engine().expand("{{CSSRef}} {{JSRef}}")
    assert expansion.metadata.sidebar is SidebarVariant.JS_REF


def test_raising_macro_keeps_placeholder() -> None:
    """A raising macro leaves its placeholder and does not stop others."""

    def boom() -> str:
        msg = "no data"
        raise RuntimeError(msg)

    expansion = _engine(Boom=boom, Ok=lambda: "fine").expand("{{Boom}} {{Ok}}")
    assert expansion.content == "{{Boom}} fine"
    assert len(expansion.failures) == 1, "expected one recorded failure"
    failure = expansion.failures[0]
    assert failure.name == "Boom"
    assert "RuntimeError" in failure.reason


def test_non_string_result_is_a_failure() -> None:
    """Macros must return strings; anything else keeps the placeholder."""
    expansion = _engine(Number=lambda: 5).expand("{{Number}}")
    assert expansion.content == "{{Number}}"
    assert "int" in expansion.failures[0].reason


def test_wrong_arity_is_a_failure() -> None:
    """Calling a macro with unexpected arguments is isolated too."""
    expansion = _engine(Plain=lambda: "x").expand("{{Plain('extra')}}")
    assert expansion.content == "{{Plain('extra')}}"
    assert expansion.failures[0].text == "{{Plain('extra')}}"
