"""Load ingest configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import (
    DEFAULT_LOCALE,
    DEFAULT_OUTPUT,
    DEFAULT_TIMEOUT,
    DEFAULT_WORKERS,
    IngestConfig,
    IngestConfigError,
    LinkConfig,
)


def load_ingest_config(path: Path) -> IngestConfig:
    """Load the YAML configuration describing an ingestion run.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``config/ingest.yaml``). Relative ``source_root`` and ``output``
        values resolve against the file's directory.

    Returns
    -------
    IngestConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    IngestConfigError
        If required fields are missing or have the wrong shape.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_ingest_config(Path("config/ingest.yaml"))  # doctest: +SKIP
    >>> config.locale  # doctest: +SKIP
    'en-US'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent

    source_root = raw.get("source_root")
    if not source_root:
        msg = "Configuration is missing 'source_root'."
        raise IngestConfigError(msg)

    return IngestConfig(
        source_root=_resolve_path(base_dir, source_root),
        locale=str(raw.get("locale") or DEFAULT_LOCALE),
        output=_resolve_path(base_dir, raw.get("output") or DEFAULT_OUTPUT),
        timeout=_parse_timeout(raw.get("timeout", DEFAULT_TIMEOUT)),
        macros=_parse_macros(raw.get("macros")),
        external_links=_parse_links(raw.get("external_links")),
        pygments_style=str(raw.get("pygments_style") or "monokai"),
        workers=_parse_workers(raw.get("workers", DEFAULT_WORKERS)),
    )


def _resolve_path(base_dir: Path, value: str | Path) -> Path:
    """Return ``value`` as a path, anchoring relative paths at ``base_dir``."""
    candidate = Path(value)
    if candidate.is_absolute():
        return candidate
    return base_dir / candidate


def _parse_timeout(value: object) -> float:
    """Return a positive timeout in seconds."""
    match value:
        case bool():
            pass
        case int() | float() if value > 0:
            return float(value)
    msg = f"'timeout' must be a positive number of seconds, got {value!r}."
    raise IngestConfigError(msg)


def _parse_workers(value: object) -> int:
    """Return a positive worker count."""
    match value:
        case bool():
            pass
        case int() if value > 0:
            return value
    msg = f"'workers' must be a positive integer, got {value!r}."
    raise IngestConfigError(msg)


def _parse_macros(value: object) -> dict[str, str]:
    """Return macro templates keyed by name."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = "'macros' must map macro names to template strings."
        raise IngestConfigError(msg)
    macros: dict[str, str] = {}
    for name, template in value.items():
        if not isinstance(template, str):
            msg = f"Macro '{name}' must be a template string."
            raise IngestConfigError(msg)
        macros[str(name)] = template
    return macros


def _parse_links(value: object) -> LinkConfig:
    """Return external-link attributes, merging overrides onto defaults."""
    base = LinkConfig()
    if value is None:
        return base
    if not isinstance(value, dict):
        msg = "'external_links' must be a mapping."
        raise IngestConfigError(msg)
    rel = value.get("rel", base.rel)
    if isinstance(rel, str):
        rel = rel.split()
    return LinkConfig(
        target=str(value.get("target", base.target) or ""),
        rel=[str(token) for token in rel or []],
    )


__all__ = ["load_ingest_config"]
