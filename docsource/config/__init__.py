"""Load and validate ingestion configuration YAML.

:func:`load_ingest_config` reads ``ingest.yaml``, applies defaults, and
returns an :class:`IngestConfig` consumed by the ingestor and the CLI.

Examples
--------
>>> from pathlib import Path
>>> from docsource.config import load_ingest_config
>>> config = load_ingest_config(Path("config/ingest.yaml"))  # doctest: +SKIP
>>> config.source_root  # doctest: +SKIP
PosixPath('config/../content/files')
"""

from .loader import load_ingest_config
from .models import (
    DEFAULT_LOCALE,
    DEFAULT_OUTPUT,
    DEFAULT_TIMEOUT,
    DEFAULT_WORKERS,
    IngestConfig,
    IngestConfigError,
    LinkConfig,
)

__all__ = [
    "DEFAULT_LOCALE",
    "DEFAULT_OUTPUT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WORKERS",
    "IngestConfig",
    "IngestConfigError",
    "LinkConfig",
    "load_ingest_config",
]
