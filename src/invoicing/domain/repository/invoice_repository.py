"""Abstract repository for the Invoice entity.

Defined in the domain layer so the domain never depends on
infrastructure. The JSON-file implementation lives in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from invoicing.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def save(self, invoice: Invoice) -> None:
        """Append a new invoice to the store."""

    @abstractmethod
    def load(self, invoice_id: str) -> Invoice:
        """Return the invoice with *invoice_id*; raise NotFoundError if absent."""

    @abstractmethod
    def list_all(self) -> list[Invoice]:
        """Return every stored invoice in insertion order."""
