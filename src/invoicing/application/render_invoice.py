"""Application service: Render Invoice use case.

Rendering is optional output. A renderer failure is logged and reported
in the result; it never propagates and never touches the stored invoice.
When PDF output is unavailable the invoice is exported as HTML instead.
"""

from __future__ import annotations

import logging

from invoicing.application.dto import RenderResultDTO
from invoicing.domain.exceptions import RenderingError, ValidationError
from invoicing.domain.repository.invoice_repository import InvoiceRepository
from invoicing.domain.service.document_renderer import DocumentRenderer

logger = logging.getLogger(__name__)

FORMATS = ("pdf", "html")


class RenderInvoiceHandler:

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        renderer: DocumentRenderer,
    ) -> None:
        self._invoice_repo = invoice_repo
        self._renderer = renderer

    def handle(self, invoice_id: str, fmt: str = "pdf") -> RenderResultDTO:
        fmt = fmt.lower()
        if fmt not in FORMATS:
            raise ValidationError(f"Unsupported format '{fmt}', expected one of {FORMATS}")

        invoice = self._invoice_repo.load(invoice_id)

        if fmt == "pdf" and not self._renderer.is_available():
            logger.warning(
                "PDF output unavailable for invoice %s, exporting HTML instead",
                invoice_id,
                extra={"context": {"invoice_id": invoice_id}},
            )
            fmt = "html"

        try:
            if fmt == "pdf":
                path = self._renderer.render_pdf(invoice)
            else:
                path = self._renderer.export_html(invoice)
        except RenderingError as exc:
            logger.error(
                "Document generation failed for invoice %s",
                invoice_id,
                extra={"context": {"invoice_id": invoice_id, "format": fmt, "error": str(exc)}},
            )
            return RenderResultDTO(invoice_id=invoice_id, format=fmt, path=None, error=str(exc))

        return RenderResultDTO(invoice_id=invoice_id, format=fmt, path=str(path))
