"""Diagnostics log: the append-only error sink.

Domain and application code report failures through the standard
``logging`` module, passing structured data as ``extra={"context": ...}``.
``DiagnosticsLog.handler()`` turns those records into lines of the form::

    [2026-01-16 21:30:00] ERROR: File operation failed | Context: {"operation": "save"}

and the same object reads the file back for the ``diagnostics`` CLI.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_LINE_PATTERN = re.compile(
    r"^\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\] (\w+): (.+)$"
)


@dataclass(frozen=True)
class DiagnosticEntry:
    timestamp: datetime
    level: str
    message: str


@dataclass(frozen=True)
class DiagnosticStats:
    total: int = 0
    by_level: dict[str, int] = field(default_factory=dict)
    recent_24h: int = 0


class DiagnosticsFormatter(logging.Formatter):

    def __init__(self) -> None:
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s: %(message)s",
            datefmt=TIMESTAMP_FORMAT,
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        # One event per line: tracebacks are not written to the sink.
        line = line.splitlines()[0] if line else line
        context = getattr(record, "context", None)
        if context:
            line += " | Context: " + json.dumps(context, default=str)
        return line


class DiagnosticsFileHandler(logging.Handler):
    """Opens the file per record so ``clear()`` can delete it at any time."""

    def __init__(self, file_path: Path, level: int = logging.WARNING) -> None:
        super().__init__(level)
        self.file_path = file_path
        self.setFormatter(DiagnosticsFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with self.file_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except Exception:
            self.handleError(record)


class DiagnosticsLog:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    def handler(self, level: int = logging.WARNING) -> DiagnosticsFileHandler:
        return DiagnosticsFileHandler(self._file_path, level)

    def recent(self, limit: int = 50) -> list[DiagnosticEntry]:
        """Return up to *limit* of the latest entries, newest first."""
        if limit <= 0:
            return []
        entries = self._entries()[-limit:]
        entries.reverse()
        return entries

    def stats(self, now: datetime | None = None) -> DiagnosticStats:
        lines = self._lines()
        if not lines:
            return DiagnosticStats()

        since = (now or datetime.now()) - timedelta(hours=24)
        by_level: Counter[str] = Counter()
        recent = 0
        for entry in self._parse(lines):
            by_level[entry.level] += 1
            if entry.timestamp > since:
                recent += 1
        return DiagnosticStats(total=len(lines), by_level=dict(by_level), recent_24h=recent)

    def clear(self) -> None:
        self._file_path.unlink(missing_ok=True)

    # --- Helpers --------------------------------------------------------------

    def _lines(self) -> list[str]:
        if not self._file_path.exists():
            return []
        text = self._file_path.read_text(encoding="utf-8")
        return [line for line in text.splitlines() if line.strip()]

    def _entries(self) -> list[DiagnosticEntry]:
        return self._parse(self._lines())

    @staticmethod
    def _parse(lines: list[str]) -> list[DiagnosticEntry]:
        entries: list[DiagnosticEntry] = []
        for line in lines:
            match = _LINE_PATTERN.match(line)
            if match is None:
                continue
            entries.append(
                DiagnosticEntry(
                    timestamp=datetime.strptime(match.group(1), TIMESTAMP_FORMAT),
                    level=match.group(2),
                    message=match.group(3),
                )
            )
        return entries
