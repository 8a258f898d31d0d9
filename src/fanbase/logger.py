"""Event sinks for completed marketplace actions.

EventLogger appends one JSON object per line to a file; MemoryEventLog
keeps the same records in a list for hosts and tests that do not need
persistence. Both stamp each record with a UTC timestamp and a sequence
number that starts at 1 and never repeats within one sink.
"""

from __future__ import annotations

import json
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get

FALLBACK_EVENTS_FILE = "fanbase_events.jsonl"


def _recent_count(n: int | None) -> int:
    if n is not None:
        return n
    configured = get("logging.default_recent")
    return configured if isinstance(configured, int) else 50


def _stamp(sequence: int, event_type: str, data: dict[str, Any]) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "sequence": sequence,
        "event_type": event_type,
        **data,
    }


class EventLogger:
    """JSONL event file, either standalone or inside a per-run directory.

    With run_id the file is logs_dir/run_id/events.jsonl (logs_dir falls
    back to logging.logs_dir) and logs_dir/latest is re-pointed at the run.
    Otherwise output_file, or logging.output_file from config, is used.
    The file is truncated when the logger is created.
    """

    output_path: Path
    _logs_dir: Path | None
    _run_id: str | None
    _sequence: int

    def __init__(
        self,
        output_file: str | None = None,
        logs_dir: str | None = None,
        run_id: str | None = None,
    ) -> None:
        if run_id and not logs_dir:
            configured_dir = get("logging.logs_dir")
            logs_dir = configured_dir if isinstance(configured_dir, str) else None
        self._logs_dir = Path(logs_dir) if logs_dir else None
        self._run_id = run_id
        self._sequence = 0

        if self._logs_dir is not None and run_id:
            self.output_path = self._logs_dir / run_id / "events.jsonl"
            self._open_run_directory(self._logs_dir, run_id)
        else:
            configured = output_file or get("logging.output_file")
            self.output_path = Path(configured if isinstance(configured, str) else FALLBACK_EVENTS_FILE)

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text("")

    @staticmethod
    def _open_run_directory(logs_dir: Path, run_id: str) -> None:
        (logs_dir / run_id).mkdir(parents=True, exist_ok=True)

        latest = logs_dir / "latest"
        if latest.is_symlink() or latest.is_file():
            latest.unlink()
        elif latest.is_dir():
            shutil.rmtree(latest)
        # Relative target so the logs directory can be moved
        latest.symlink_to(run_id)

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Append one event line."""
        self._sequence += 1
        line = json.dumps(_stamp(self._sequence, event_type, data))
        with open(self.output_path, "a") as f:
            f.write(line + "\n")

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Last n events, oldest first (n defaults to logging.default_recent)."""
        count = _recent_count(n)
        if count <= 0 or not self.output_path.exists():
            return []
        lines = [line for line in self.output_path.read_text().splitlines() if line]
        return [json.loads(line) for line in lines[-count:]]

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def run_id(self) -> str | None:
        return self._run_id

    @property
    def logs_dir(self) -> Path | None:
        return self._logs_dir


class MemoryEventLog:
    """Event sink that keeps records in memory."""

    events: list[dict[str, Any]]
    _sequence: int

    def __init__(self) -> None:
        self.events = []
        self._sequence = 0

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        self._sequence += 1
        self.events.append(_stamp(self._sequence, event_type, data))

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        count = _recent_count(n)
        return [dict(e) for e in self.events[-count:]] if count > 0 else []

    def event_types(self) -> list[str]:
        """Event types in deposit order."""
        return [e["event_type"] for e in self.events]

    @property
    def sequence(self) -> int:
        return self._sequence
