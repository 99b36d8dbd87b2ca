"""Unit tests for the Invoice entity and its record conversion."""

import itertools
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from invoicing.domain.exceptions import ValidationError
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.model.value_objects import Money
from tests.fakes import make_allocator


def _invoice(customer: str = "Acme Corp") -> Invoice:
    return Invoice.create(customer, make_allocator())


class TestInvoiceCreation:

    def test_happy_path(self):
        invoice = _invoice()
        assert invoice.customer == "Acme Corp"
        assert invoice.id == "INV-2026-0001"
        assert invoice.items == []
        assert invoice.discount == Money.zero()

    def test_timestamp_is_utc_to_the_second(self):
        invoice = _invoice()
        assert invoice.created_at.tzinfo == timezone.utc
        assert invoice.created_at.microsecond == 0

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_bad_customer_rejected(self, name):
        with pytest.raises(ValidationError, match="Customer name"):
            Invoice.create(name, make_allocator())

    def test_rejected_customer_does_not_consume_a_number(self):
        allocator = make_allocator()
        with pytest.raises(ValidationError):
            Invoice.create("", allocator)
        assert Invoice.create("Bob", allocator).id == "INV-2026-0001"


class TestAddItem:

    def test_appends_in_order(self):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 2)
        invoice.add_item("Product B", 50, 1, is_sale_item=True)
        assert [i.name for i in invoice.items] == ["Product A", "Product B"]
        assert invoice.items[1].is_sale_item is True

    def test_identical_items_not_merged(self):
        invoice = _invoice()
        invoice.add_item("Widget", "10", 1)
        invoice.add_item("Widget", "10", 1)
        assert len(invoice.items) == 2

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError, match="Item name"):
            _invoice().add_item("", "10", 1)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError, match="Item price"):
            _invoice().add_item("Widget", "-0.01", 1)

    def test_non_numeric_price_rejected(self):
        with pytest.raises(ValidationError, match="Item price"):
            _invoice().add_item("Widget", "abc", 1)

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity_rejected(self, qty):
        with pytest.raises(ValidationError, match="Item quantity"):
            _invoice().add_item("Widget", "10", qty)

    def test_free_item_allowed(self):
        invoice = _invoice()
        invoice.add_item("Sample", "0", 3)
        assert invoice.subtotal == Money.zero()


class TestTotals:

    def test_subtotal_is_sum_of_lines(self):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 2)
        invoice.add_item("Product B", "50.00", 1)
        assert invoice.subtotal == Money.of("250.00")
        assert invoice.total == Decimal("250.00")

    def test_subtotal_independent_of_order(self):
        lines = [("A", "19.99", 3), ("B", "0.01", 7), ("C", "1000", 1)]
        expected = sum(Decimal(p) * q for _, p, q in lines)
        for ordering in itertools.permutations(lines):
            invoice = _invoice()
            for name, price, qty in ordering:
                invoice.add_item(name, price, qty)
            assert invoice.subtotal.amount == expected

    def test_has_sale_items(self):
        invoice = _invoice()
        invoice.add_item("Regular", "10", 1)
        assert not invoice.has_sale_items
        invoice.add_item("Clearance", "5", 1, is_sale_item=True)
        assert invoice.has_sale_items


class TestDiscount:

    def test_percentage_of_subtotal(self):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 2)
        invoice.apply_discount(10)
        assert invoice.discount == Money.of("20")
        assert invoice.total == Decimal("180")

    def test_second_discount_replaces_first(self):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 1)
        invoice.apply_discount(10)
        invoice.apply_discount(25)
        assert invoice.total == Decimal("75")

    def test_discount_fixed_at_call_time(self):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 1)
        invoice.apply_discount(10)
        invoice.add_item("Product B", "100.00", 1)
        # Still $10 off, not 10% of the new subtotal.
        assert invoice.discount == Money.of("10")
        assert invoice.total == Decimal("190")

    @pytest.mark.parametrize("percent", [-1, 100.01, "abc"])
    def test_out_of_range_rejected(self, percent):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 1)
        with pytest.raises(ValidationError):
            invoice.apply_discount(percent)

    def test_full_discount_allowed(self):
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 1)
        invoice.apply_discount(100)
        assert invoice.total == Decimal("0")


class TestRecordConversion:

    def _populated(self) -> Invoice:
        invoice = _invoice()
        invoice.add_item("Product A", "100.00", 2)
        invoice.add_item("Product B", "49.95", 1, is_sale_item=True)
        invoice.apply_discount(10)
        return invoice

    def test_record_shape(self):
        record = self._populated().to_record()
        assert set(record) == {"id", "customer", "items", "discount", "total", "created_at"}
        assert record["items"][0] == {
            "name": "Product A",
            "price": "100.00",
            "quantity": 2,
            "is_sale_item": False,
        }
        assert Decimal(record["total"]) == Decimal("224.955")

    def test_round_trip(self):
        original = self._populated()
        restored = Invoice.from_record(original.to_record())

        assert restored.id == original.id
        assert restored.customer == original.customer
        assert restored.items == original.items
        assert restored.discount == original.discount
        assert restored.total == original.total
        assert restored.to_record()["created_at"] == original.to_record()["created_at"]

    def test_accepts_numbers_and_legacy_qty_key(self):
        record = {
            "id": "INV-2026-0042",
            "customer": "Legacy Ltd",
            "items": [{"name": "Old Widget", "price": 12.5, "qty": 4}],
            "discount": 0,
            "total": 50,
            "created_at": "2026-01-16 21:30:00",
        }
        invoice = Invoice.from_record(record)
        assert invoice.items[0].quantity.value == 4
        assert invoice.items[0].is_sale_item is False
        assert invoice.created_at == datetime(2026, 1, 16, 21, 30, tzinfo=timezone.utc)

    def test_invalid_item_in_record_rejected(self):
        record = _invoice().to_record()
        record["items"] = [{"name": "Bad", "price": "10", "quantity": 0}]
        with pytest.raises(ValidationError, match="Item quantity"):
            Invoice.from_record(record)

    def test_missing_field_rejected(self):
        record = _invoice().to_record()
        del record["customer"]
        with pytest.raises(ValidationError, match="Malformed invoice record"):
            Invoice.from_record(record)
