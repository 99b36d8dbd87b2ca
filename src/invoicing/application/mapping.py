"""Shared Invoice -> DTO mapping for the query and command handlers."""

from __future__ import annotations

from decimal import Decimal

from invoicing.application.dto import InvoiceDTO, LineItemDTO
from invoicing.domain.model.invoice import TIMESTAMP_FORMAT, Invoice
from invoicing.domain.model.value_objects import format_currency


def to_invoice_dto(
    invoice: Invoice,
    region: str | None = None,
    tax: Decimal | None = None,
) -> InvoiceDTO:
    return InvoiceDTO(
        id=invoice.id,
        customer=invoice.customer,
        items=[
            LineItemDTO(
                name=item.name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
                is_sale_item=item.is_sale_item,
            )
            for item in invoice.items
        ],
        subtotal=str(invoice.subtotal),
        discount=str(invoice.discount),
        total=format_currency(invoice.total),
        created_at=invoice.created_at.strftime(TIMESTAMP_FORMAT) + " UTC",
        region=region,
        tax=format_currency(tax) if tax is not None else None,
        amount_due=format_currency(invoice.total + tax) if tax is not None else None,
    )
