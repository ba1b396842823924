"""Built-in and configuration-defined macro functions.

Built-ins cover the cross-reference and badge macros that appear most often in
reference documentation. Additional macros are declared in the ingest
configuration as Jinja templates receiving ``args`` and ``locale``.
"""

from __future__ import annotations

import typing as typ
from html import escape

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from .arguments import MacroArgument
from .engine import MacroFunction, MacroRegistry

SIDEBAR_PLACEHOLDERS = ("CSSRef", "JSRef", "JsSidebar", "jsSidebar")
JS_GLOBALS_PATH = "Web/JavaScript/Reference/Global_Objects"


class MacroTemplateError(ValueError):
    """Raised when a configured macro template cannot be compiled."""


def _code_link(href: str, label: str) -> str:
    return f'<a href="{escape(href, quote=True)}"><code>{escape(label)}</code></a>'


def _doc_href(locale: str, path: str) -> str:
    return f"/{locale}/docs/{path}"


def _label(name: MacroArgument, display: MacroArgument) -> str:
    return str(display) if display else str(name)


def default_macros(locale: str) -> dict[str, MacroFunction]:
    """Return the built-in macro table with links rooted at ``locale``.

    Every function is pure: its output depends only on ``locale`` and the
    literal arguments.
    """

    def empty() -> str:
        return ""

    def jsxref(
        name: MacroArgument = "", display: MacroArgument = "", *_: MacroArgument
    ) -> str:
        target = str(name).replace("()", "").replace(".prototype.", ".")
        target = target.replace(".", "/")
        return _code_link(
            _doc_href(locale, f"{JS_GLOBALS_PATH}/{target}"), _label(name, display)
        )

    def cssxref(
        name: MacroArgument = "", display: MacroArgument = "", *_: MacroArgument
    ) -> str:
        target = str(name).replace("()", "")
        return _code_link(_doc_href(locale, f"Web/CSS/{target}"), _label(name, display))

    def domxref(
        name: MacroArgument = "", display: MacroArgument = "", *_: MacroArgument
    ) -> str:
        target = str(name).replace("()", "").replace(".", "/")
        return _code_link(_doc_href(locale, f"Web/API/{target}"), _label(name, display))

    def html_element(
        name: MacroArgument = "", display: MacroArgument = "", *_: MacroArgument
    ) -> str:
        label = str(display) if display else f"<{name}>"
        return _code_link(_doc_href(locale, f"Web/HTML/Element/{name}"), label)

    def glossary(
        term: MacroArgument = "", display: MacroArgument = "", *_: MacroArgument
    ) -> str:
        href = _doc_href(locale, f"Glossary/{str(term).replace(' ', '_')}")
        return f'<a href="{escape(href, quote=True)}">{escape(_label(term, display))}</a>'

    def badge(kind: str, title: str) -> MacroFunction:
        def render(*_: MacroArgument) -> str:
            return (
                f'<abbr class="icon icon-{kind}" title="{escape(title, quote=True)}">'
                f'<span class="visually-hidden">{escape(title)}</span></abbr>'
            )

        return render

    macros: dict[str, MacroFunction] = dict.fromkeys(SIDEBAR_PLACEHOLDERS, empty)
    macros.update(
        {
            "jsxref": jsxref,
            "cssxref": cssxref,
            "domxref": domxref,
            "HTMLElement": html_element,
            "Glossary": glossary,
            "Deprecated_Inline": badge("deprecated", "Deprecated"),
            "Experimental_Inline": badge("experimental", "Experimental"),
        }
    )
    return macros


class TemplateMacro:
    """Macro backed by a Jinja template string."""

    def __init__(self, env: Environment, name: str, source: str, locale: str) -> None:
        self.name = name
        self.locale = locale
        try:
            self._template = env.from_string(source)
        except TemplateSyntaxError as exc:
            msg = f"Macro '{name}' has an invalid template: {exc.message}"
            raise MacroTemplateError(msg) from exc

    def __call__(self, *args: MacroArgument) -> str:
        return self._template.render(args=args, locale=self.locale)

    def __repr__(self) -> str:
        return f"TemplateMacro({self.name!r})"


def build_registry(
    locale: str, templates: typ.Mapping[str, str] | None = None
) -> MacroRegistry:
    """Return a registry of built-in macros merged with template macros.

    Parameters
    ----------
    locale : str
        Locale used to root generated documentation links.
    templates : Mapping[str, str], optional
        Macro name to Jinja template source. Template macros replace built-ins
        of the same name.

    Raises
    ------
    MacroTemplateError
        If a template fails to compile.
    """
    functions = default_macros(locale)
    if templates:
        env = Environment(autoescape=True, undefined=StrictUndefined)
        for name, source in templates.items():
            functions[name] = TemplateMacro(env, name, source, locale)
    return MacroRegistry(functions)


__all__ = [
    "MacroTemplateError",
    "TemplateMacro",
    "build_registry",
    "default_macros",
]
