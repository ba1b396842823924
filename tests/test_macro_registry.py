"""Unit tests for built-in and template-defined macros."""

from __future__ import annotations

import pytest

from docsource.macros import (
    MacroEngine,
    MacroTemplateError,
    build_registry,
    default_macros,
)


def test_jsxref_links_global_object_member() -> None:
    """jsxref should link into the JavaScript global objects reference."""
    engine = MacroEngine(build_registry("en-US"))
    content = engine.expand('{{jsxref("Array.prototype.map()")}}').content
    assert content == (
        '<a href="/en-US/docs/Web/JavaScript/Reference/Global_Objects/Array/map">'
        "<code>Array.prototype.map()</code></a>"
    ), f"unexpected jsxref output {content!r}"


def test_html_element_escapes_label() -> None:
    """HTMLElement renders the element name as escaped code."""
    content = MacroEngine(build_registry("uk")).expand('{{HTMLElement("div")}}').content
    assert content == (
        '<a href="/uk/docs/Web/HTML/Element/div"><code>&lt;div&gt;</code></a>'
    )


def test_display_text_overrides_label() -> None:
    """A second argument replaces the link label."""
    content = MacroEngine(build_registry("en-US")).expand(
        '{{Glossary("first-class function", "first-class")}}'
    ).content
    assert content == (
        '<a href="/en-US/docs/Glossary/first-class_function">first-class</a>'
    )


def test_sidebar_macros_render_empty() -> None:
    """Sidebar macros produce no inline markup."""
    macros = default_macros("en-US")
    for name in ("CSSRef", "JSRef", "JsSidebar", "jsSidebar"):
        assert macros[name]() == "", f"{name} should render empty"


def test_builtin_macros_are_pure() -> None:
    """Identical invocations produce identical output."""
    macros = default_macros("en-US")
    assert macros["cssxref"]("color") == macros["cssxref"]("color")


def test_template_macro_receives_args_and_locale() -> None:
    """Configured templates render with ``args`` and ``locale``."""
    registry = build_registry(
        "de",
        {"Compat": '<div data-query="{{ args[0] }}" lang="{{ locale }}"></div>'},
    )
    content = MacroEngine(registry).expand('{{Compat("api.Array")}}').content
    assert content == '<div data-query="api.Array" lang="de"></div>'


def test_template_macro_escapes_arguments() -> None:
    """Template arguments are HTML-escaped."""
    registry = build_registry("en-US", {"Say": "<b>{{ args[0] }}</b>"})
    content = MacroEngine(registry).expand("{{Say('<i>')}}").content
    assert content == "<b>&lt;i&gt;</b>"


def test_template_overrides_builtin() -> None:
    """Templates replace built-ins of the same name."""
    registry = build_registry("en-US", {"JSRef": "<nav>js</nav>"})
    assert MacroEngine(registry).expand("{{JSRef}}").content == "<nav>js</nav>"


def test_template_missing_argument_is_a_failure() -> None:
    """Referencing an absent argument keeps the placeholder."""
    registry = build_registry("en-US", {"Need": "{{ args[0] }}"})
    expansion = MacroEngine(registry).expand("{{Need}}")
    assert expansion.content == "{{Need}}"
    assert expansion.failures, "expected a recorded failure"


def test_invalid_template_raises() -> None:
    """Templates that do not compile are rejected up front."""
    with pytest.raises(MacroTemplateError, match="Broken"):
        build_registry("en-US", {"Broken": "{{ args[0 }}"})
