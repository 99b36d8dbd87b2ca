"""HTML and PDF rendering of invoices.

The HTML document is built here; PDF conversion is delegated to
:mod:`xhtml2pdf`. Output files are named ``invoice_<id>.<ext>`` inside
the configured output directory.
"""

from __future__ import annotations

import importlib.util
from html import escape
from pathlib import Path
from string import Template

from invoicing.domain.exceptions import RenderingError
from invoicing.domain.model.invoice import TIMESTAMP_FORMAT, Invoice
from invoicing.domain.model.value_objects import format_currency
from invoicing.domain.service.document_renderer import DocumentRenderer

_PAGE = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Invoice #$invoice_id</title>
    <style>
        body { font-family: Helvetica, Arial, sans-serif; margin: 20px; }
        .header { text-align: center; margin-bottom: 30px; }
        .invoice-info { margin-bottom: 20px; }
        table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
        th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
        th { background-color: #f2f2f2; }
        .totals { text-align: right; }
        .totals td { border: none; padding: 5px; }
        .footer { margin-top: 30px; font-size: 12px; color: #666; }
    </style>
</head>
<body>
    <div class="header">
        <h1>INVOICE</h1>
        <p>Invoice #$invoice_id</p>
    </div>
    <div class="invoice-info">
        <p><strong>Customer:</strong> $customer</p>
        <p><strong>Date:</strong> $created_at</p>
    </div>
    <table>
        <thead>
            <tr><th>Item</th><th>Price</th><th>Quantity</th><th>Total</th></tr>
        </thead>
        <tbody>
$rows
        </tbody>
    </table>
    <div class="totals">
        <table>
            <tr><td>Subtotal:</td><td>$subtotal</td></tr>
$discount_row
            <tr><td><strong>Total:</strong></td><td><strong>$total</strong></td></tr>
        </table>
    </div>
    <div class="footer">
        <p>Thank you for your business!</p>
    </div>
</body>
</html>
""")

_ROW = Template(
    "            <tr><td>$name</td><td>$price</td><td>$quantity</td><td>$line_total</td></tr>"
)
_DISCOUNT_ROW = Template("            <tr><td>Discount:</td><td>-$amount</td></tr>")


def render_html(invoice: Invoice) -> str:
    """Return the invoice as a standalone HTML page."""
    rows = "\n".join(
        _ROW.substitute(
            name=escape(item.name),
            price=escape(str(item.unit_price)),
            quantity=item.quantity.value,
            line_total=escape(str(item.line_total)),
        )
        for item in invoice.items
    )
    discount_row = ""
    if invoice.discount.amount > 0:
        discount_row = _DISCOUNT_ROW.substitute(amount=escape(str(invoice.discount)))

    return _PAGE.substitute(
        invoice_id=escape(invoice.id),
        customer=escape(invoice.customer),
        created_at=escape(invoice.created_at.strftime(TIMESTAMP_FORMAT)),
        rows=rows,
        subtotal=escape(str(invoice.subtotal)),
        discount_row=discount_row,
        total=escape(format_currency(invoice.total)),
    )


class HtmlInvoiceRenderer(DocumentRenderer):

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    def render_pdf(self, invoice: Invoice) -> Path:
        try:
            from xhtml2pdf import pisa
        except ImportError as exc:
            raise RenderingError("PDF generation not available: xhtml2pdf is not installed") from exc

        html = render_html(invoice)
        target = self._target(invoice, "pdf")
        try:
            with target.open("wb") as fh:
                status = pisa.CreatePDF(html, dest=fh, encoding="utf-8")
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise RenderingError(f"Failed to save PDF file: {target}") from exc
        except Exception as exc:
            target.unlink(missing_ok=True)
            raise RenderingError(
                f"Failed to generate PDF content for invoice {invoice.id}: {exc}"
            ) from exc
        if status.err:
            target.unlink(missing_ok=True)
            raise RenderingError(
                f"Failed to generate PDF content for invoice {invoice.id} "
                f"({status.err} error(s))"
            )
        return target

    def export_html(self, invoice: Invoice) -> Path:
        target = self._target(invoice, "html")
        try:
            target.write_text(render_html(invoice), encoding="utf-8")
        except OSError as exc:
            raise RenderingError(f"Failed to save HTML file: {target}") from exc
        return target

    def is_available(self) -> bool:
        return importlib.util.find_spec("xhtml2pdf") is not None

    def _target(self, invoice: Invoice, extension: str) -> Path:
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderingError(
                f"Cannot create output directory: {self._output_dir}"
            ) from exc
        return self._output_dir / f"invoice_{invoice.id}.{extension}"
