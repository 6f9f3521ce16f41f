"""JSON-lines event log for state and storage events."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

LEVELS: Dict[str, int] = {"debug": 10, "info": 20, "warning": 30, "error": 40}


class Logger:
    """Minimal logger that appends events to ``<logs_dir>/events.log``."""

    def __init__(self, logs_dir: Path, level: str = "info") -> None:
        self.logs_dir = logs_dir
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.logs_dir / "events.log"
        self.threshold = LEVELS.get(str(level).lower(), LEVELS["info"])

    def _write(self, level: str, event: str, payload: Dict[str, Any]) -> None:
        if LEVELS[level] < self.threshold:
            return
        entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": level,
            "event": event,
            **payload,
        }
        # Event logging never fails the operation being logged.
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with self.log_file.open("a", encoding="utf-8") as fp:
                fp.write(json.dumps(entry) + "\n")
        except OSError:
            return

    def debug(self, event: str, **payload: Any) -> None:
        self._write("debug", event, payload)

    def info(self, event: str, **payload: Any) -> None:
        self._write("info", event, payload)

    def warning(self, event: str, **payload: Any) -> None:
        self._write("warning", event, payload)

    def error(self, event: str, **payload: Any) -> None:
        self._write("error", event, payload)

    def read_events(self) -> list[Dict[str, Any]]:
        """Return logged events, skipping lines that are not valid JSON."""
        if not self.log_file.exists():
            return []
        events = []
        for line in self.log_file.read_text(encoding="utf-8").splitlines():
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return events
