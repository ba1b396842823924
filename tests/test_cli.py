"""Tests for the ``docsource`` command-line entry points.

The commands are invoked as plain functions so their return codes and printed
output can be asserted with ``capsys``.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docsource.cli import _resolve_config, expand, ingest


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Return a tree with one routed page and one page missing its slug."""
    root = tmp_path / "files"
    root.mkdir()
    (root / "a.md").write_text("---\nslug: A\n---\n# A\n", encoding="utf-8")
    (root / "b.md").write_text("# No front matter\n", encoding="utf-8")
    return root


def test_ingest_writes_collection_and_summary(
    tmp_path: Path, source_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """ingest writes the JSON collection and reports skipped files."""
    output = tmp_path / "out.json"
    status = ingest(
        config=tmp_path / "missing.yaml", source_root=source_root, output=output
    )
    captured = capsys.readouterr().out
    assert status == 1, "a skipped file should make the run unsuccessful"
    assert "ingested 1, skipped 1, ineligible 0" in captured
    assert "missing-routing-field" in captured
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [node["path"] for node in payload["nodes"]] == ["/en-US/docs/A"]


def test_ingest_config_overrides(tmp_path: Path, source_root: Path) -> None:
    """Command-line values replace configured ones."""
    config_path = tmp_path / "ingest.yaml"
    config_path.write_text("source_root: elsewhere\nlocale: fr\n", encoding="utf-8")
    settings = _resolve_config(config_path, source_root, "uk", None)
    assert settings.source_root == source_root
    assert settings.locale == "uk"
    assert settings.output == tmp_path / "public/content.json"


def test_ingest_requires_config_or_source(tmp_path: Path) -> None:
    """Without a config file a source root must be given."""
    with pytest.raises(FileNotFoundError, match="source-root"):
        _resolve_config(tmp_path / "missing.yaml", None, None, None)


def test_expand_prints_content_and_sidebar(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """expand prints the expanded snippet and the sidebar signal."""
    expand('{{cssxref("color")}}{{CSSRef}}', locale="en-US")
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        '<a href="/en-US/docs/Web/CSS/color"><code>color</code></a>',
        "sidebar: CSSRef",
    ]
