"""Structured JSONL audit log of inventory operations."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from inventorize.errors import InventoryIOError


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Outcome of a single build, verify or update run."""

    timestamp: str
    operation: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlAuditLogger:
    """Append-only JSONL audit logger.

    Failures to create or append to the log surface as InventoryIOError.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise InventoryIOError(self._path, error.strerror or str(error)) from error

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        """Append one event as a single JSON object line."""
        line = json.dumps(asdict(event), sort_keys=True) + "\n"
        try:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(line)
        except OSError as error:
            raise InventoryIOError(self._path, error.strerror or str(error)) from error
