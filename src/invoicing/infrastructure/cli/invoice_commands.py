"""CLI commands for invoices."""

from __future__ import annotations

import click

from invoicing.application.create_invoice import CreateInvoiceHandler
from invoicing.application.dto import InvoiceDTO, LineItemSpec
from invoicing.application.list_invoices import ListInvoicesHandler
from invoicing.application.render_invoice import FORMATS, RenderInvoiceHandler
from invoicing.application.show_invoice import ShowInvoiceHandler
from invoicing.domain.exceptions import DomainException
from invoicing.infrastructure.bootstrap import (
    document_renderer,
    invoice_calculator,
    invoice_repository,
    number_allocator,
)


def _parse_item(raw: str) -> LineItemSpec:
    """Parse 'Widget:15.00:3' or 'Widget:15.00:3:sale' into a LineItemSpec."""
    parts = [p.strip() for p in raw.split(":")]
    is_sale = False
    if len(parts) == 4:
        if parts[3].lower() != "sale":
            raise click.BadParameter(
                f"Invalid flag '{parts[3]}' in item '{raw}'. Only 'sale' is allowed."
            )
        is_sale = True
        parts = parts[:3]
    if len(parts) != 3:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'Name:Price:Qty[:sale]'."
        )
    name, price, qty_str = parts
    try:
        qty = int(qty_str)
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{qty_str}' for item '{name}'.")
    return LineItemSpec(name=name, price=price, quantity=qty, is_sale_item=is_sale)


def _display_invoice(dto: InvoiceDTO) -> None:
    """Shared formatting for displaying an invoice."""
    click.echo(f"Invoice {dto.id}")
    click.echo(f"Customer: {dto.customer}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        name = f"{item.name} *" if item.is_sale_item else item.name
        click.echo(
            f"  {name:<24} {item.quantity:>5} {item.unit_price:>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>25}")
    if dto.discount != "$0.00":
        click.echo(f"  {'Discount':<30} {'-' + dto.discount:>25}")
    click.echo(f"  {'Total':<30} {dto.total:>25}")
    if dto.tax is not None:
        click.echo(f"  {'Tax (' + str(dto.region) + ')':<30} {dto.tax:>25}")
        click.echo(f"  {'Amount Due':<30} {dto.amount_due:>25}")


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option(
    "--item",
    "items",
    required=True,
    multiple=True,
    help="Line item as 'Name:Price:Qty', append ':sale' for sale items. Repeatable.",
)
@click.option("--discount", default=None, help="Discount percentage (0-100).")
@click.option("--region", default=None, help="Tax region, e.g. US-CA.")
def invoice_create(
    customer: str,
    items: tuple[str, ...],
    discount: str | None,
    region: str | None,
) -> None:
    """Create and store a new invoice.

    Without --discount the automatic business rules apply.
    """
    specs = [_parse_item(raw) for raw in items]

    handler = CreateInvoiceHandler(
        invoice_repo=invoice_repository(),
        number_allocator=number_allocator(),
        calculator=invoice_calculator(),
    )

    try:
        dto = handler.handle(
            customer_name=customer,
            item_specs=specs,
            discount_percent=discount,
            region=region,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Invoice {dto.id} created")
    _display_invoice(dto)


@click.command("show")
@click.option("--id", "invoice_id", required=True, help="Invoice ID to display.")
@click.option("--region", default=None, help="Tax region, e.g. US-CA.")
def invoice_show(invoice_id: str, region: str | None) -> None:
    """Show details of a stored invoice."""
    handler = ShowInvoiceHandler(
        invoice_repo=invoice_repository(),
        calculator=invoice_calculator(),
    )

    try:
        dto = handler.handle(invoice_id, region=region)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("list")
def invoice_list() -> None:
    """List all stored invoices."""
    handler = ListInvoicesHandler(invoice_repo=invoice_repository())

    try:
        rows = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No invoices found.")
        return

    click.echo(f"{'ID':<16} {'Customer':<24} {'Items':>5} {'Total':>14}  Created")
    click.echo("-" * 82)
    for row in rows:
        click.echo(
            f"{row.id:<16} {row.customer:<24} {row.item_count:>5} {row.total:>14}  {row.created_at}"
        )


@click.command("render")
@click.option("--id", "invoice_id", required=True, help="Invoice ID to render.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS, case_sensitive=False),
    default="pdf",
    show_default=True,
    help="Output format.",
)
def invoice_render(invoice_id: str, fmt: str) -> None:
    """Render a stored invoice as PDF or HTML."""
    handler = RenderInvoiceHandler(
        invoice_repo=invoice_repository(),
        renderer=document_renderer(),
    )

    try:
        result = handler.handle(invoice_id, fmt=fmt)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.ok:
        raise click.ClickException(f"Rendering failed: {result.error}")
    click.echo(f"{result.format.upper()} written to {result.path}")
