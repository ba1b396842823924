"""In-memory content collection receiving records in any order."""

from __future__ import annotations

import json
import threading
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .models import ContentRecord


class ContentCollection:
    """Append-only sink for content records.

    ``add_record`` may be called concurrently; records keep arrival order,
    which carries no meaning.
    """

    def __init__(self, type_name: str = "MdnPage") -> None:
        self.type_name = type_name
        self._records: list[ContentRecord] = []
        self._lock = threading.Lock()

    def add_record(self, record: ContentRecord) -> None:
        """Append ``record`` to the collection."""
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[ContentRecord]:
        """Return a snapshot of the collected records."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def write_json(self, path: Path) -> Path:
        """Write every record's node payload to ``path``, sorted by route."""
        nodes = sorted(
            (record.as_node() for record in self.records), key=lambda node: node["path"]
        )
        payload = {"typeName": self.type_name, "nodes": nodes}
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=str),
            encoding="utf-8",
        )
        return path


__all__ = ["ContentCollection"]
