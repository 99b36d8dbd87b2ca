"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers
and about file locations. Every other module depends only on
abstractions. Paths are resolved on each call so the environment
variables below can be changed between invocations (tests rely on it).

- ``INVOICING_DATA_DIR``: directory for invoices, counter and error log.
- ``INVOICING_TAX_RATES``: tax table file (default ``<data>/tax_rates.json``).
- ``INVOICING_OUTPUT_DIR``: rendered documents (default ``<data>/documents``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from invoicing.domain.service.invoice_calculator import InvoiceCalculator
from invoicing.domain.service.invoice_number_allocator import InvoiceNumberAllocator
from invoicing.infrastructure.diagnostics import DiagnosticsLog
from invoicing.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from invoicing.infrastructure.persistence.json_tax_table_source import (
    JsonTaxTableSource,
)
from invoicing.infrastructure.persistence.text_counter_repository import (
    TextCounterRepository,
)
from invoicing.infrastructure.rendering.html_invoice_renderer import (
    HtmlInvoiceRenderer,
)

DATA_DIR_ENV = "INVOICING_DATA_DIR"
TAX_RATES_ENV = "INVOICING_TAX_RATES"
OUTPUT_DIR_ENV = "INVOICING_OUTPUT_DIR"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

ROOT_LOGGER = "invoicing"
_DIAGNOSTICS_HANDLER = "invoicing-diagnostics"
_CONSOLE_HANDLER = "invoicing-console"


def data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


def invoice_repository() -> JsonInvoiceRepository:
    return JsonInvoiceRepository(data_dir() / "invoices.json")


def counter_repository() -> TextCounterRepository:
    return TextCounterRepository(data_dir() / "invoice_counter.txt")


def number_allocator() -> InvoiceNumberAllocator:
    return InvoiceNumberAllocator(counter_repository())


def tax_table_source() -> JsonTaxTableSource:
    override = os.environ.get(TAX_RATES_ENV)
    path = Path(override) if override else data_dir() / "tax_rates.json"
    return JsonTaxTableSource(path)


def invoice_calculator() -> InvoiceCalculator:
    return InvoiceCalculator(tax_table_source())


def document_renderer() -> HtmlInvoiceRenderer:
    override = os.environ.get(OUTPUT_DIR_ENV)
    return HtmlInvoiceRenderer(Path(override) if override else data_dir() / "documents")


def diagnostics_log() -> DiagnosticsLog:
    return DiagnosticsLog(data_dir() / "error_log.txt")


def configure_logging(verbose: bool = False) -> None:
    """Send WARNING and above to the diagnostics log; echo to stderr if verbose.

    Replaces handlers installed by an earlier call so repeated CLI
    invocations in one process do not write each line twice.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if handler.get_name() in (_DIAGNOSTICS_HANDLER, _CONSOLE_HANDLER):
            logger.removeHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    sink = diagnostics_log().handler()
    sink.set_name(_DIAGNOSTICS_HANDLER)
    logger.addHandler(sink)

    if verbose:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        console.set_name(_CONSOLE_HANDLER)
        logger.addHandler(console)
