"""Domain service: sequential invoice numbering.

Numbers look like ``INV-2026-0001``: a prefix, the calendar year and a
per-year sequence. The counter is read and rewritten on every
allocation, so two allocators sharing a counter file can hand out the
same number.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from invoicing.domain.exceptions import PersistenceError
from invoicing.domain.repository.counter_repository import CounterRepository

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "INV"
SEQUENCE_MODULUS = 10_000


@dataclass(frozen=True)
class InvoiceNumber:
    """Parsed parts of a well-formed invoice number."""

    year: int
    sequence: int


class InvoiceNumberAllocator:

    def __init__(
        self,
        counter_repo: CounterRepository,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._counter_repo = counter_repo
        self._prefix = prefix
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._pattern = re.compile(rf"^{re.escape(prefix)}-(\d{{4}})-(\d{{4}})$")

    def allocate_next(self) -> str:
        """Increment this year's counter and return the formatted number.

        The sequence is printed modulo 10000, so it stays four digits wide
        past 9999. If the counter cannot be read or written, a
        ``PREFIX-<unix timestamp>`` id is returned instead and a warning is
        logged; ``parse`` rejects that shape.
        """
        now = self._clock()
        try:
            counter = self._counter_repo.get(now.year) + 1
            self._counter_repo.put(now.year, counter)
        except PersistenceError as exc:
            fallback = f"{self._prefix}-{int(now.timestamp())}"
            logger.warning(
                "Invoice counter unavailable, issued timestamp id %s",
                fallback,
                extra={"context": {"year": now.year, "error": str(exc)}},
            )
            return fallback

        return f"{self._prefix}-{now.year:04d}-{counter % SEQUENCE_MODULUS:04d}"

    def parse(self, invoice_id: str) -> InvoiceNumber | None:
        """Split ``PREFIX-YYYY-NNNN`` into year and sequence, else None."""
        match = self._pattern.match(invoice_id)
        if match is None:
            return None
        return InvoiceNumber(year=int(match.group(1)), sequence=int(match.group(2)))

    def is_valid_format(self, invoice_id: str) -> bool:
        return self.parse(invoice_id) is not None
