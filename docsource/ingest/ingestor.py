"""Turn a tree of documentation sources into routed content records.

Every eligible file is processed in its own task on a worker pool owned by
the ingestor; the run waits for all of them before returning, except for
workers that overran their timeout. Per-file problems become :class:`SkippedFile` entries
on the report instead of aborting the batch.

Example
-------
>>> from pathlib import Path
>>> from docsource.config import IngestConfig
>>> from docsource.ingest import ContentIngestor
>>> report = ContentIngestor(IngestConfig(Path("files"))).run()  # doctest: +SKIP
>>> report.summary()  # doctest: +SKIP
'ingested 12, skipped 1, ineligible 3'
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
import typing as typ
from concurrent.futures import Future, ThreadPoolExecutor

from docsource.errors import DocumentParseError, MissingRoutingFieldError
from docsource.macros import MacroEngine, MacroRegistry, build_registry
from docsource.processors import HtmlProcessor, MarkdownProcessor, RenderedDocument

from .collection import ContentCollection
from .models import (
    ContentRecord,
    FileMacroFailure,
    IngestReport,
    SkippedFile,
    SkipReason,
    SourceFormat,
)
from .sources import classify, split_front_matter, walk

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from docsource.config import IngestConfig

logger = logging.getLogger(__name__)

ROUTE_TEMPLATE = "/{locale}/docs/{slug}"
SLUG_FIELD = "slug"

FileOutcome: typ.TypeAlias = "tuple[ContentRecord | SkippedFile, list[FileMacroFailure]]"


def build_route(locale: str, metadata: typ.Mapping[str, typ.Any]) -> str:
    """Return the routed path for a document from its front matter.

    Raises
    ------
    MissingRoutingFieldError
        If the metadata has no non-empty ``slug``.
    """
    slug = metadata.get(SLUG_FIELD)
    if slug is None or not str(slug).strip():
        raise MissingRoutingFieldError(SLUG_FIELD)
    return ROUTE_TEMPLATE.format(locale=locale, slug=str(slug).strip().strip("/"))


class ContentIngestor:
    """Ingest HTML and Markdown sources into a :class:`ContentCollection`."""

    def __init__(
        self,
        config: IngestConfig,
        *,
        registry: MacroRegistry | None = None,
        collection: ContentCollection | None = None,
        walker: cabc.Callable[[Path], cabc.Iterable[Path]] = walk,
    ) -> None:
        """Initialize the ingestor.

        Parameters
        ----------
        config : IngestConfig
            Source root, locale, timeout, and rendering options.
        registry : MacroRegistry, optional
            Macro table; defaults to the built-ins merged with
            ``config.macros``.
        collection : ContentCollection, optional
            Sink receiving records as files complete.
        walker : Callable[[Path], Iterable[Path]], optional
            Lists candidate files below the source root.
        """
        self.config = config
        self.registry = registry or build_registry(config.locale, config.macros)
        self.engine = MacroEngine(self.registry)
        self.collection = collection if collection is not None else ContentCollection()
        self.walker = walker
        self.html = HtmlProcessor()
        self.markdown = MarkdownProcessor(
            pygments_style=config.pygments_style,
            link_target=config.external_links.target,
            link_rel=config.external_links.rel,
            html_processor=self.html,
        )

    def run(self) -> IngestReport:
        """Ingest every eligible file and return the run report."""
        return asyncio.run(self.run_async())

    async def run_async(self) -> IngestReport:
        """Ingest every eligible file concurrently and return the run report."""
        report = IngestReport()
        eligible: list[tuple[Path, SourceFormat]] = []
        for path in self.walker(self.config.source_root):
            source_format = classify(path)
            if source_format is None:
                report.ineligible += 1
                continue
            eligible.append((path, source_format))

        executor = ThreadPoolExecutor(
            max_workers=self.config.workers, thread_name_prefix="docsource"
        )
        slots = asyncio.Semaphore(self.config.workers)
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(
                        self._ingest(path, source_format, executor, slots)
                    )
                    for path, source_format in eligible
                ]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for task in tasks:
            outcome, failures = task.result()
            report.macro_failures.extend(failures)
            match outcome:
                case ContentRecord():
                    report.records.append(outcome)
                case SkippedFile():
                    report.skipped.append(outcome)
        if report.ineligible:
            logger.info("ignored %d ineligible files", report.ineligible)
        return report

    async def _ingest(
        self,
        path: Path,
        source_format: SourceFormat,
        executor: ThreadPoolExecutor,
        slots: asyncio.Semaphore,
    ) -> FileOutcome:
        """Build and emit the record for one file, converting failures to skips.

        The timeout starts once a worker slot is held, so time spent queued
        behind other files never counts against this one. A slot is released
        when its worker thread returns, even if the file already timed out.
        """
        failures: list[FileMacroFailure] = []
        await slots.acquire()
        work = executor.submit(self._load, path, source_format, failures)
        work.add_done_callback(
            functools.partial(_release_slot, asyncio.get_running_loop(), slots)
        )
        try:
            async with asyncio.timeout(self.config.timeout):
                record = await asyncio.wrap_future(work)
        except TimeoutError:
            skipped = SkippedFile(
                path, SkipReason.TIMEOUT, f"exceeded {self.config.timeout:g}s"
            )
        except OSError as exc:
            skipped = SkippedFile(path, SkipReason.IO_FAILURE, str(exc))
        except DocumentParseError as exc:
            skipped = SkippedFile(path, SkipReason.PARSE_FAILURE, str(exc))
        except MissingRoutingFieldError as exc:
            skipped = SkippedFile(path, SkipReason.MISSING_ROUTING_FIELD, str(exc))
        except Exception as exc:  # noqa: BLE001 - one file never aborts the batch
            logger.exception("unexpected error while ingesting %s", path)
            skipped = SkippedFile(
                path, SkipReason.PARSE_FAILURE, f"{type(exc).__name__}: {exc}"
            )
        else:
            self.collection.add_record(record)
            return record, failures
        logger.warning("skipped %s (%s): %s", path, skipped.reason, skipped.detail)
        return skipped, failures

    def _load(
        self,
        path: Path,
        source_format: SourceFormat,
        failures: list[FileMacroFailure],
    ) -> ContentRecord:
        """Read ``path`` and build its record; runs on a worker thread."""
        return self.build_record(path, path.read_bytes(), source_format, failures)

    def build_record(
        self,
        path: Path,
        raw: bytes,
        source_format: SourceFormat,
        failures: list[FileMacroFailure] | None = None,
    ) -> ContentRecord:
        """Return the content record for a file's raw bytes.

        Raises
        ------
        DocumentParseError
            If the front matter or body cannot be parsed.
        MissingRoutingFieldError
            If the front matter has no ``slug``.
        """
        parts = split_front_matter(raw)
        route = build_route(self.config.locale, parts.metadata)
        document = self.render(parts.body, source_format)
        expansion = self.engine.expand(document.markup)
        if failures is not None:
            failures.extend(FileMacroFailure(path, item) for item in expansion.failures)
        return ContentRecord(
            path=route,
            content=expansion.content,
            headings=tuple(document.headings),
            front_matter=parts.metadata,
            sidebar=expansion.metadata.sidebar,
            source=path,
        )

    def render(self, body: str, source_format: SourceFormat) -> RenderedDocument:
        """Render ``body`` with the processor matching ``source_format``."""
        match source_format:
            case SourceFormat.HTML:
                return self.html.process(body)
            case SourceFormat.MARKDOWN:
                return self.markdown.process(body)
        msg = f"unsupported source format: {source_format!r}"
        raise DocumentParseError(msg)


def _release_slot(
    loop: asyncio.AbstractEventLoop, slots: asyncio.Semaphore, _work: Future[typ.Any]
) -> None:
    """Return a worker slot from the worker thread once its file is done."""
    if loop.is_closed():
        return
    # the run may finish between the check and the call
    with contextlib.suppress(RuntimeError):
        loop.call_soon_threadsafe(slots.release)


__all__ = ["ROUTE_TEMPLATE", "ContentIngestor", "build_route"]
