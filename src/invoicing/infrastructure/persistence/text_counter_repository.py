"""Plain-text implementation of CounterRepository.

One ``year:counter`` pair per line. Each ``put`` rereads and rewrites
the whole file; unparseable lines are carried over untouched.
"""

from __future__ import annotations

from pathlib import Path

from invoicing.domain.exceptions import PersistenceError
from invoicing.domain.repository.counter_repository import CounterRepository


class TextCounterRepository(CounterRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get(self, year: int) -> int:
        for line in self._read_lines():
            parsed = _parse_line(line)
            if parsed is not None and parsed[0] == year:
                return parsed[1]
        return 0

    def put(self, year: int, value: int) -> None:
        lines: list[str] = []
        found = False
        for line in self._read_lines():
            parsed = _parse_line(line)
            if parsed is not None and parsed[0] == year:
                lines.append(f"{year}:{value}")
                found = True
            else:
                lines.append(line)
        if not found:
            lines.append(f"{year}:{value}")

        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("\n".join(lines), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to write counter file: {self._file_path}") from exc

    def _read_lines(self) -> list[str]:
        if not self._file_path.exists():
            return []
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Failed to read counter file: {self._file_path}") from exc
        return [line for line in text.strip().splitlines() if line.strip()]


def _parse_line(line: str) -> tuple[int, int] | None:
    parts = line.strip().split(":")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None
