"""Application service: List Invoices use case (query)."""

from __future__ import annotations

from invoicing.application.dto import InvoiceSummaryDTO
from invoicing.domain.model.invoice import TIMESTAMP_FORMAT
from invoicing.domain.model.value_objects import format_currency
from invoicing.domain.repository.invoice_repository import InvoiceRepository


class ListInvoicesHandler:

    def __init__(self, invoice_repo: InvoiceRepository) -> None:
        self._invoice_repo = invoice_repo

    def handle(self) -> list[InvoiceSummaryDTO]:
        return [
            InvoiceSummaryDTO(
                id=invoice.id,
                customer=invoice.customer,
                item_count=len(invoice.items),
                total=format_currency(invoice.total),
                created_at=invoice.created_at.strftime(TIMESTAMP_FORMAT),
            )
            for invoice in self._invoice_repo.list_all()
        ]
