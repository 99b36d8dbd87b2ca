"""Application service: Show Invoice use case (query)."""

from __future__ import annotations

from invoicing.application.dto import InvoiceDTO
from invoicing.application.mapping import to_invoice_dto
from invoicing.domain.repository.invoice_repository import InvoiceRepository
from invoicing.domain.service.invoice_calculator import InvoiceCalculator


class ShowInvoiceHandler:

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        calculator: InvoiceCalculator,
    ) -> None:
        self._invoice_repo = invoice_repo
        self._calculator = calculator

    def handle(self, invoice_id: str, region: str | None = None) -> InvoiceDTO:
        invoice = self._invoice_repo.load(invoice_id)
        if region is None:
            return to_invoice_dto(invoice)
        tax = self._calculator.calculate_tax(invoice.total, region)
        return to_invoice_dto(invoice, region=region, tax=tax)
