"""Normalize documentation sources into routed content records.

This package exposes the CLI entry points used by the ``docsource`` console
script to ingest a tree of HTML and Markdown files with front matter and
embedded macros.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docsource import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
