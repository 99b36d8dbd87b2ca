"""Invoice entity, the core of the domain.

The Invoice owns its line items. Items are append-only; the discount is
a fixed amount derived from the subtotal at the moment it was applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Mapping

from invoicing.domain.exceptions import ValidationError
from invoicing.domain.model.value_objects import Money, Quantity, to_decimal

if TYPE_CHECKING:
    from invoicing.domain.service.invoice_number_allocator import (
        InvoiceNumberAllocator,
    )

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _require_text(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} must be a non-empty string")
    return value


@dataclass(frozen=True)
class LineItem:
    """A single billed line. Immutable once added to an invoice."""

    name: str
    unit_price: Money
    quantity: Quantity
    is_sale_item: bool = False

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Invoice:
    """Entity for a customer invoice.

    Use the ``Invoice.create()`` factory for new invoices. It validates
    the customer and allocates an id. The ``__init__`` stays simple so
    ``from_record`` can restore the persisted id and timestamp.
    """

    id: str
    customer: str
    items: list[LineItem] = field(default_factory=list)
    discount: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW invoices only) ---------------------------------

    @staticmethod
    def create(customer_name: str, number_allocator: InvoiceNumberAllocator) -> Invoice:
        """Create an empty invoice for *customer_name* with a fresh id."""
        _require_text(customer_name, "Customer name")
        return Invoice(id=number_allocator.allocate_next(), customer=customer_name)

    # --- Mutations ------------------------------------------------------------

    def add_item(
        self,
        name: str,
        price: str | float | int | Decimal,
        quantity: int,
        is_sale_item: bool = False,
    ) -> LineItem:
        """Append a line item. Identical items are kept as separate lines."""
        _require_text(name, "Item name")
        try:
            unit_price = Money.of(price)
        except ValidationError as exc:
            raise ValidationError(f"Item price must be a non-negative number ({exc})") from exc
        try:
            qty = Quantity(quantity)
        except ValidationError as exc:
            raise ValidationError(f"Item quantity must be a positive integer ({exc})") from exc

        item = LineItem(
            name=name,
            unit_price=unit_price,
            quantity=qty,
            is_sale_item=bool(is_sale_item),
        )
        self.items.append(item)
        return item

    def apply_discount(self, percent: str | float | int | Decimal) -> None:
        """Set the discount to *percent* % of the current subtotal.

        Replaces any earlier discount. The amount is fixed at call time:
        items added afterwards are not discounted.
        """
        value = to_decimal(percent)
        if not value.is_finite() or value < 0 or value > 100:
            raise ValidationError("Discount percentage must be between 0 and 100")
        self.discount = self.subtotal.percentage(value)

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def total(self) -> Decimal:
        # Not clamped: a discount larger than the subtotal shows up here
        # as a negative total until validation reports it.
        return self.subtotal.amount - self.discount.amount

    @property
    def has_sale_items(self) -> bool:
        return any(item.is_sale_item for item in self.items)

    # --- Record conversion ----------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customer": self.customer,
            "items": [
                {
                    "name": item.name,
                    "price": str(item.unit_price.amount),
                    "quantity": item.quantity.value,
                    "is_sale_item": item.is_sale_item,
                }
                for item in self.items
            ],
            "discount": str(self.discount.amount),
            "total": str(self.total),
            "created_at": self.created_at.strftime(TIMESTAMP_FORMAT),
        }

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> Invoice:
        """Rebuild an invoice from its persisted shape.

        Every item goes back through ``add_item`` so a hand-edited file
        cannot smuggle in invalid lines. ``total`` is recomputed, not read.
        """
        try:
            invoice = Invoice(
                id=str(record["id"]),
                customer=_require_text(record["customer"], "Customer name"),
                discount=Money.of(record.get("discount", 0)),
                created_at=_parse_timestamp(record["created_at"]),
            )
            raw_items = record.get("items") or []
            for raw in raw_items:
                # Older files wrote the quantity under "qty".
                quantity = raw["quantity"] if "quantity" in raw else raw["qty"]
                invoice.add_item(
                    raw["name"],
                    raw["price"],
                    quantity,
                    raw.get("is_sale_item", False),
                )
        except (KeyError, TypeError) as exc:
            raise ValidationError(f"Malformed invoice record: {exc!r}") from exc
        return invoice


def _parse_timestamp(raw: str) -> datetime:
    try:
        parsed = datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise ValidationError(f"Invalid created_at timestamp: {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
