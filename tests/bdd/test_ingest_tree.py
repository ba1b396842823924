"""Behaviour tests for ingesting a documentation tree.

These pytest-bdd scenarios, driven by ``features/ingest_tree.feature``, build
a temporary source tree and run ``ContentIngestor`` over it to prove that
per-file problems are reported without halting the batch and that
parenthesised paths are never ingested.

Usage
-----
Run ``pytest tests/bdd/test_ingest_tree.py -v`` after installing the dev
dependencies (``uv sync --group dev``).
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, scenarios, then, when

from docsource.config import IngestConfig
from docsource.ingest import ContentIngestor, IngestReport, SkipReason

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "ingest_tree.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@given("a source tree with a routed page and a page without a slug")
def given_routed_and_unrouted(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Create one routable Markdown page and one lacking a slug."""
    root = tmp_path / "files"
    _write(
        root / "guide" / "index.md",
        "---\ntitle: Guide\nslug: Learn/Guide\n---\n# Guide\n\n## Next steps\n",
    )
    _write(root / "draft" / "index.md", "---\ntitle: Draft\n---\n# Draft\n")
    scenario_state["root"] = root


@given("a source tree containing a parenthesised path")
def given_parenthesised(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Create an eligible page and an otherwise valid parenthesised page."""
    root = tmp_path / "files"
    _write(root / "plain" / "index.html", "---\nslug: Plain\n---\n<h2>Plain</h2>")
    _write(
        root / "calc()" / "index.html",
        "---\nslug: Web/CSS/calc()\n---\n<h2>calc()</h2>",
    )
    scenario_state["root"] = root


@when("I ingest the source tree")
def when_ingest(scenario_state: dict[str, object]) -> None:
    """Run the ingestor over the scenario's source tree."""
    root = typ.cast("Path", scenario_state["root"])
    scenario_state["report"] = ContentIngestor(IngestConfig(source_root=root)).run()


@then("the routed page is emitted with its heading index")
def then_routed_emitted(scenario_state: dict[str, object]) -> None:
    """The routable page produces a record with both headings."""
    report = typ.cast("IngestReport", scenario_state["report"])
    assert [record.path for record in report.records] == ["/en-US/docs/Learn/Guide"]
    anchors = [heading.anchor for heading in report.records[0].headings]
    assert anchors == ["guide", "next-steps"], f"unexpected anchors {anchors!r}"


@then("the page without a slug is reported as missing a routing field")
def then_unrouted_reported(scenario_state: dict[str, object]) -> None:
    """The slug-less page is skipped with a routing reason."""
    report = typ.cast("IngestReport", scenario_state["report"])
    assert len(report.skipped) == 1, "expected exactly one skipped file"
    skipped = report.skipped[0]
    assert skipped.path.parent.name == "draft"
    assert skipped.reason is SkipReason.MISSING_ROUTING_FIELD
    assert "slug" in skipped.detail


@then("no record is emitted for the parenthesised path")
def then_no_parenthesised_record(scenario_state: dict[str, object]) -> None:
    """Only the plain page is emitted."""
    report = typ.cast("IngestReport", scenario_state["report"])
    assert [record.path for record in report.records] == ["/en-US/docs/Plain"]
    assert report.skipped == [], "parenthesised paths are not reported as skipped"


@then("the parenthesised path is counted as ineligible")
def then_counted_ineligible(scenario_state: dict[str, object]) -> None:
    """The parenthesised page contributes to the ineligible count."""
    report = typ.cast("IngestReport", scenario_state["report"])
    assert report.ineligible == 1
