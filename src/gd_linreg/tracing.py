"""Run trace collection and persistence helpers."""

from __future__ import annotations

import csv
import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from gd_linreg.exceptions import InputFileError


class RunTraceCollector:
    """Collector for structured events emitted during a training run."""

    _CSV_COLUMNS = [
        "seq",
        "timestamp",
        "event_type",
        "action",
        "status",
        "iteration",
        "details",
    ]

    def __init__(self) -> None:
        self._events: list[dict[str, Any]] = []
        self._next_seq = 1
        self._live_sink: Callable[[dict[str, Any]], None] | None = None

    def set_live_sink(self, sink: Callable[[dict[str, Any]], None] | None) -> None:
        """Set optional callback to stream trace events as they are recorded."""
        self._live_sink = sink

    def log(
        self,
        *,
        event_type: str,
        action: str,
        status: str = "ok",
        iteration: int | None = None,
        details: dict[str, Any] | str | None = None,
    ) -> None:
        """Record a structured trace event."""
        event = {
            "seq": self._next_seq,
            "timestamp": datetime.now(UTC).isoformat(),
            "event_type": event_type,
            "action": action,
            "status": status,
            "iteration": "" if iteration is None else iteration,
            "details": _serialize_details(details),
        }
        self._events.append(event)
        self._next_seq += 1
        if self._live_sink is not None:
            self._live_sink(dict(event))

    def events(self) -> list[dict[str, Any]]:
        """Return a shallow copy of collected events."""
        return list(self._events)

    def write(self, path: Path) -> None:
        """Write events as CSV when `path` ends in .csv, otherwise as JSON."""
        try:
            if path.suffix.lower() == ".csv":
                self.write_csv(path)
            else:
                self.write_json(path)
        except OSError as exc:
            raise InputFileError("trace", path, exc.strerror or str(exc)) from exc

    def write_json(self, path: Path) -> None:
        """Write trace events as JSON array."""
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self.events(), indent=2, sort_keys=False)
        path.write_text(payload + "\n", encoding="utf-8")

    def write_csv(self, path: Path) -> None:
        """Write trace events as CSV rows."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as file_obj:
            writer = csv.DictWriter(file_obj, fieldnames=self._CSV_COLUMNS)
            writer.writeheader()
            for event in self.events():
                writer.writerow({key: event.get(key, "") for key in self._CSV_COLUMNS})


def _serialize_details(details: dict[str, Any] | str | None) -> str:
    if details is None:
        return ""
    if isinstance(details, str):
        return details
    return json.dumps(details, sort_keys=True, default=str)
