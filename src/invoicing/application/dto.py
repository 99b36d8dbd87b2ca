"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one line as requested by the caller."""

    name: str
    price: str
    quantity: int
    is_sale_item: bool = False


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    is_sale_item: bool


@dataclass(frozen=True)
class InvoiceDTO:
    """Output: a complete invoice as displayed to the user."""

    id: str
    customer: str
    items: list[LineItemDTO]
    subtotal: str
    discount: str
    total: str
    created_at: str
    region: str | None = None
    tax: str | None = None
    amount_due: str | None = None


@dataclass(frozen=True)
class InvoiceSummaryDTO:
    """Output: one row of the invoice listing."""

    id: str
    customer: str
    item_count: int
    total: str
    created_at: str


@dataclass(frozen=True)
class RenderResultDTO:
    """Output: where a rendered document went, or why it did not."""

    invoice_id: str
    format: str
    path: str | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
