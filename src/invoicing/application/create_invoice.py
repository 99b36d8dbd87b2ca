"""Application service: Create Invoice use case.

Orchestrates numbering, line items, discounts, validation and
persistence for a new invoice.
"""

from __future__ import annotations

import logging

from invoicing.application.dto import InvoiceDTO, LineItemSpec
from invoicing.application.mapping import to_invoice_dto
from invoicing.domain.exceptions import ValidationError
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.repository.invoice_repository import InvoiceRepository
from invoicing.domain.service.invoice_calculator import InvoiceCalculator
from invoicing.domain.service.invoice_number_allocator import InvoiceNumberAllocator

logger = logging.getLogger(__name__)


class CreateInvoiceHandler:

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        number_allocator: InvoiceNumberAllocator,
        calculator: InvoiceCalculator,
    ) -> None:
        self._invoice_repo = invoice_repo
        self._number_allocator = number_allocator
        self._calculator = calculator

    def handle(
        self,
        customer_name: str,
        item_specs: list[LineItemSpec],
        discount_percent: str | None = None,
        region: str | None = None,
    ) -> InvoiceDTO:
        """Create and store a new invoice.

        Steps:
        1. Allocate a number and add every line item.
        2. Apply the explicit discount, or the automatic business rules
           when none is given. Discounts always come after the last item.
        3. Validate; any violation aborts before anything is saved.
        4. Persist and return a DTO, with tax if a region was given.
        """
        invoice = Invoice.create(customer_name, self._number_allocator)
        for spec in item_specs:
            invoice.add_item(spec.name, spec.price, spec.quantity, spec.is_sale_item)

        if discount_percent is not None:
            invoice.apply_discount(discount_percent)
        else:
            self._calculator.apply_business_rules(invoice)

        violations = self._calculator.validate_invoice(invoice)
        if violations:
            logger.warning(
                "Validation failed: %s",
                "; ".join(violations),
                extra={"context": {"errors": violations, "data": invoice.to_record()}},
            )
            raise ValidationError("; ".join(violations))

        self._invoice_repo.save(invoice)

        if region is None:
            return to_invoice_dto(invoice)
        tax = self._calculator.calculate_tax(invoice.total, region)
        return to_invoice_dto(invoice, region=region, tax=tax)
