"""Structured JSONL server event log."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

LEVELS = ("debug", "info", "warning", "error")


@dataclass(slots=True, frozen=True)
class LogEvent:
    """One structured server event."""

    timestamp: str
    kind: str
    level: str
    message: str
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_params(params: dict[str, object]) -> dict[str, object]:
    """Reduce message params to loggable metadata without document bodies."""
    sanitized: dict[str, object] = {}
    for key in sorted(params.keys()):
        value = params[key]
        if key in {"uri", "system", "method"} and isinstance(value, str):
            sanitized[key] = value
            continue
        if key == "version" and (isinstance(value, int) or value is None):
            sanitized[key] = value
            continue
        if key in {"textDocument", "text_document"} and isinstance(value, dict):
            sanitized[key] = sanitize_params(value)
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, list):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value.keys())
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlEventLogger:
    """Append-only JSONL event logger and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: LogEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def log(self, kind: str, message: str, level: str = "info", **metadata: object) -> None:
        """Build and append an event stamped with the current time."""
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        self.append(
            LogEvent(
                timestamp=utc_timestamp(),
                kind=kind,
                level=level,
                message=message,
                metadata=dict(metadata),
            )
        )

    def read(
        self,
        since: str | None = None,
        limit: int = 50,
        kind: str | None = None,
    ) -> list[dict[str, object]]:
        """Read recent events, optionally filtered by timestamp lower bound and kind."""
        if limit < 1:
            return []
        entries: list[dict[str, object]] = []
        if not self._path.exists():
            return entries
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if since is not None:
                    ts = record.get("timestamp")
                    if not isinstance(ts, str) or ts < since:
                        continue
                if kind is not None and record.get("kind") != kind:
                    continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]
