"""CLI commands for tax lookups."""

from __future__ import annotations

import click

from invoicing.domain.exceptions import DomainException
from invoicing.domain.model.value_objects import format_currency
from invoicing.infrastructure.bootstrap import invoice_calculator


@click.command("rate")
@click.option("--region", required=True, help="Region code, e.g. US-CA or UK.")
def tax_rate(region: str) -> None:
    """Show the tax rate for a region (fails if it does not resolve)."""
    try:
        rate = invoice_calculator().get_tax_rate(region)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{region.upper()}: {rate}")


@click.command("calc")
@click.option("--amount", required=True, help="Taxable amount (e.g. 100.00).")
@click.option("--region", default="US-CA", show_default=True, help="Region code.")
def tax_calc(amount: str, region: str) -> None:
    """Calculate tax on an amount (falls back to 10% if the region is unknown)."""
    try:
        tax = invoice_calculator().calculate_tax(amount, region)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Tax for {region.upper()}: {format_currency(tax)}")


@click.command("regions")
def tax_regions() -> None:
    """List every region in the tax table."""
    regions = invoice_calculator().supported_regions()

    if not regions:
        click.echo("No tax regions configured.")
        return

    for region in regions:
        click.echo(region)
