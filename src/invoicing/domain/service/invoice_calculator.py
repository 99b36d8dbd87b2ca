"""Domain service: tax lookup and automatic business rules.

Two tax entry points with deliberately different failure behaviour:

- ``calculate_tax`` never raises for lookup problems. A missing table or
  an unresolved region is logged and billed at ``FALLBACK_TAX_RATE``.
- ``get_tax_rate`` raises ``NotFoundError`` (or ``ConfigurationError``)
  so callers that must not guess can tell the difference.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from invoicing.domain.exceptions import DomainException, NotFoundError
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.model.value_objects import Money, to_decimal
from invoicing.domain.repository.tax_table_source import TaxTableSource

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
FALLBACK_TAX_RATE = Decimal("0.10")
BULK_DISCOUNT_THRESHOLD = Money(Decimal("1000"))
BULK_DISCOUNT_PERCENT = Decimal("5")
MAX_NAME_LENGTH = 255
MAX_UNIT_PRICE = Decimal("999999.99")
MAX_QUANTITY = 999_999


class InvoiceCalculator:

    def __init__(self, tax_source: TaxTableSource) -> None:
        self._tax_source = tax_source

    # --- Tax ------------------------------------------------------------------

    def calculate_tax(
        self,
        subtotal: Money | Decimal | str | float | int,
        region_code: str = "US-CA",
    ) -> Decimal:
        amount = subtotal.amount if isinstance(subtotal, Money) else to_decimal(subtotal)
        try:
            rate = self.get_tax_rate(region_code)
        except DomainException as exc:
            logger.error(
                "Tax calculation failed for region %s, using fallback rate",
                region_code,
                extra={
                    "context": {
                        "region": region_code,
                        "fallback_rate": str(FALLBACK_TAX_RATE),
                        "error": str(exc),
                    }
                },
            )
            rate = FALLBACK_TAX_RATE
        return amount * rate

    def get_tax_rate(self, region_code: str) -> Decimal:
        rate = self._tax_source.load().lookup(region_code)
        if rate is None:
            raise NotFoundError(f"Tax rate not found for region: {region_code}")
        return rate

    def is_region_supported(self, region_code: str) -> bool:
        try:
            self.get_tax_rate(region_code)
        except DomainException:
            return False
        return True

    def supported_regions(self) -> list[str]:
        try:
            return self._tax_source.load().regions()
        except DomainException as exc:
            logger.warning(
                "Tax table unavailable, no regions listed",
                extra={"context": {"error": str(exc)}},
            )
            return []

    # --- Business rules -------------------------------------------------------

    def apply_business_rules(self, invoice: Invoice) -> Invoice:
        """Give a 5% discount on orders over $1000 without sale items.

        Uses the subtotal at call time; calling again after adding items
        replaces the earlier discount.
        """
        try:
            if invoice.subtotal > BULK_DISCOUNT_THRESHOLD and not invoice.has_sale_items:
                invoice.apply_discount(BULK_DISCOUNT_PERCENT)
        except DomainException as exc:
            logger.error(
                "Business rules could not be applied to invoice %s",
                invoice.id,
                extra={"context": {"invoice_id": invoice.id, "error": str(exc)}},
            )
        return invoice

    # --- Validation -----------------------------------------------------------

    @staticmethod
    def validate_invoice(invoice: Invoice) -> list[str]:
        """Return human-readable violations; an empty list means valid."""
        errors: list[str] = []

        customer = invoice.customer
        if not isinstance(customer, str) or not customer.strip():
            errors.append("Customer name is required and must be a string")
        elif len(customer) > MAX_NAME_LENGTH:
            errors.append(f"Customer name cannot exceed {MAX_NAME_LENGTH} characters")

        if not invoice.items:
            errors.append("Invoice must have at least one item")

        for number, item in enumerate(invoice.items, start=1):
            if not isinstance(item.name, str) or not item.name.strip():
                errors.append(f"Item {number}: Name is required and must be a string")
            elif len(item.name) > MAX_NAME_LENGTH:
                errors.append(
                    f"Item {number}: Name cannot exceed {MAX_NAME_LENGTH} characters"
                )

            price = item.unit_price.amount
            if price < 0:
                errors.append(f"Item {number}: Price cannot be negative")
            elif price > MAX_UNIT_PRICE:
                errors.append(f"Item {number}: Price cannot exceed $999,999.99")

            quantity = item.quantity.value
            if quantity <= 0:
                errors.append(f"Item {number}: Quantity must be positive")
            elif quantity > MAX_QUANTITY:
                errors.append(f"Item {number}: Quantity cannot exceed 999,999")

        subtotal = invoice.subtotal.amount
        if subtotal < 0:
            errors.append("Subtotal cannot be negative")
        if invoice.total < 0:
            errors.append("Total cannot be negative")

        discount = invoice.discount.amount
        if discount < 0:
            errors.append("Discount cannot be negative")
        elif discount > subtotal:
            errors.append("Discount cannot exceed subtotal")

        return errors
