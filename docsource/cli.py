"""Cyclopts CLI entrypoint for ingesting documentation sources.

The ``docsource`` console script walks a source tree of HTML and Markdown
files, renders each into anchored markup with expanded macros, and writes the
resulting content collection as JSON. ``docsource expand`` runs the macro
engine over a snippet, which helps when authoring macro templates.

Examples
--------
Ingest the tree described by the default configuration:

>>> from docsource.cli import main
>>> main()  # doctest: +SKIP

Ingest a different tree into a custom file:

>>> from docsource.cli import app
>>> app(
...     ["ingest", "--source-root", "files", "--output", "dist/content.json"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import DEFAULT_LOCALE, IngestConfig, load_ingest_config
from .ingest import ContentCollection, ContentIngestor
from .macros import MacroEngine, build_registry

DEFAULT_CONFIG = Path("config/ingest.yaml")

app = App(name="docsource", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _resolve_config(
    config: Path,
    source_root: Path | None,
    locale: str | None,
    output: Path | None,
) -> IngestConfig:
    """Load ``config`` when present and apply command-line overrides."""
    if config.exists():
        resolved = load_ingest_config(config)
    elif source_root is not None:
        resolved = IngestConfig(source_root=source_root)
    else:
        msg = f"Configuration file '{config}' not found and no --source-root given."
        raise FileNotFoundError(msg)
    overrides: dict[str, typ.Any] = {}
    if source_root is not None:
        overrides["source_root"] = source_root
    if locale:
        overrides["locale"] = locale
    if output is not None:
        overrides["output"] = output
    return dc.replace(resolved, **overrides)


@app.command(help="Ingest HTML and Markdown sources into a content collection.")
def ingest(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to ingest config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    source_root: typ.Annotated[
        Path | None,
        Parameter(help="Override the source directory", env_var="INPUT_SOURCE_ROOT"),
    ] = None,
    locale: typ.Annotated[
        str | None, Parameter(help="Override the locale", env_var="INPUT_LOCALE")
    ] = None,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Override the output file", env_var="INPUT_OUTPUT"),
    ] = None,
) -> int:
    """Ingest a documentation tree and write its records as JSON.

    Parameters
    ----------
    config : Path, optional
        Path to the ``ingest.yaml`` configuration (overridable via
        ``INPUT_CONFIG``). May be absent when ``source_root`` is given.
    source_root : Path or None, optional
        Directory to walk instead of the configured one.
    locale : str or None, optional
        Locale used in routed paths instead of the configured one.
    output : Path or None, optional
        JSON file to write instead of the configured one.

    Returns
    -------
    int
        ``0`` when every eligible file produced a record, ``1`` otherwise.
    """
    settings = _resolve_config(config, source_root, locale, output)
    collection = ContentCollection()
    report = ContentIngestor(settings, collection=collection).run()
    written = collection.write_json(settings.output)
    print(f"wrote {_format_path(written)}")
    print(report.summary())
    for skipped in sorted(report.skipped, key=lambda item: str(item.path)):
        print(f"skipped {_format_path(skipped.path)}: {skipped.reason} {skipped.detail}")
    for item in report.macro_failures:
        print(
            f"macro failed in {_format_path(item.path)}: "
            f"{item.failure.text} ({item.failure.reason})"
        )
    return 0 if report.ok else 1


@app.command(help="Expand macros in a snippet and print the result.")
def expand(
    text: str,
    *,
    locale: typ.Annotated[
        str, Parameter(help="Locale for generated links", env_var="INPUT_LOCALE")
    ] = DEFAULT_LOCALE,
) -> None:
    """Print ``text`` with macros expanded, followed by any sidebar signal.

    Parameters
    ----------
    text : str
        Snippet containing ``{{Macro(...)}}`` placeholders.
    locale : str, optional
        Locale used to root generated documentation links.
    """
    expansion = MacroEngine(build_registry(locale)).expand(text)
    print(expansion.content)
    if expansion.metadata.sidebar is not None:
        print(f"sidebar: {expansion.metadata.sidebar}")
    for failure in expansion.failures:
        print(f"failed: {failure.text} ({failure.reason})", file=sys.stderr)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docsource`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
