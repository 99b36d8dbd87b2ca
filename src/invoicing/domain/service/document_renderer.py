"""Abstract document renderer.

Turns an invoice into a printable file. Implementations raise
RenderingError on failure; they must never modify the invoice.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from invoicing.domain.model.invoice import Invoice


class DocumentRenderer(ABC):

    @abstractmethod
    def render_pdf(self, invoice: Invoice) -> Path:
        """Write a PDF for *invoice* and return its path."""

    @abstractmethod
    def export_html(self, invoice: Invoice) -> Path:
        """Write an HTML version of *invoice* and return its path."""

    @abstractmethod
    def is_available(self) -> bool:
        """True if PDF output can be produced in this environment."""
