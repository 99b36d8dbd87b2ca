"""Abstract repository for the per-year invoice number counter."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CounterRepository(ABC):

    @abstractmethod
    def get(self, year: int) -> int:
        """Return the last sequence issued for *year* (0 if none)."""

    @abstractmethod
    def put(self, year: int, value: int) -> None:
        """Persist *value* as the last sequence issued for *year*."""
