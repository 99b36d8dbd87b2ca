import click

from invoicing.infrastructure.bootstrap import configure_logging
from invoicing.infrastructure.cli.diagnostics_commands import (
    diagnostics_clear,
    diagnostics_recent,
    diagnostics_stats,
)
from invoicing.infrastructure.cli.invoice_commands import (
    invoice_create,
    invoice_list,
    invoice_render,
    invoice_show,
)
from invoicing.infrastructure.cli.tax_commands import tax_calc, tax_rate, tax_regions


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Echo log messages to stderr.")
def cli(verbose: bool) -> None:
    """Invoicing: create, store and render invoices"""
    configure_logging(verbose)


@cli.group()
def invoice() -> None:
    """Manage invoices."""


@cli.group()
def tax() -> None:
    """Look up tax rates."""


@cli.group()
def diagnostics() -> None:
    """Inspect the error log."""


# Register subcommands
invoice.add_command(invoice_create)
invoice.add_command(invoice_list)
invoice.add_command(invoice_render)
invoice.add_command(invoice_show)
tax.add_command(tax_calc)
tax.add_command(tax_rate)
tax.add_command(tax_regions)
diagnostics.add_command(diagnostics_clear)
diagnostics.add_command(diagnostics_recent)
diagnostics.add_command(diagnostics_stats)
