"""Unit tests for invoice numbering."""

import logging

from invoicing.domain.service.invoice_number_allocator import (
    InvoiceNumber,
    InvoiceNumberAllocator,
)
from tests.fakes import FakeCounterRepository, fixed_clock


def _allocator(repo: FakeCounterRepository, **kwargs) -> InvoiceNumberAllocator:
    return InvoiceNumberAllocator(repo, clock=fixed_clock(), **kwargs)


class TestAllocateNext:

    def test_sequential_numbers(self):
        repo = FakeCounterRepository()
        allocator = _allocator(repo)
        assert allocator.allocate_next() == "INV-2026-0001"
        assert allocator.allocate_next() == "INV-2026-0002"
        assert repo.counters == {2026: 2}

    def test_counters_are_per_year(self):
        repo = FakeCounterRepository({2025: 87})
        assert _allocator(repo).allocate_next() == "INV-2026-0001"
        assert repo.counters == {2025: 87, 2026: 1}

    def test_sequence_rolls_over_past_9999(self):
        repo = FakeCounterRepository({2026: 9999})
        assert _allocator(repo).allocate_next() == "INV-2026-0000"
        assert repo.counters[2026] == 10000

    def test_custom_prefix(self):
        allocator = _allocator(FakeCounterRepository(), prefix="CRN")
        assert allocator.allocate_next() == "CRN-2026-0001"

    def test_counter_failure_falls_back_to_timestamp(self, caplog):
        allocator = _allocator(FakeCounterRepository(broken=True))
        with caplog.at_level(logging.WARNING):
            invoice_id = allocator.allocate_next()

        expected = int(fixed_clock()().timestamp())
        assert invoice_id == f"INV-{expected}"
        assert "timestamp id" in caplog.text
        assert allocator.parse(invoice_id) is None

    def test_shared_counter_snapshot_issues_duplicates(self):
        # Two allocators that both read before either writes hand out the
        # same number: the counter is not locked between get and put.
        repo = FakeCounterRepository({2026: 4})
        stale = repo.get(2026)
        first = _allocator(repo).allocate_next()
        repo.put(2026, stale)
        second = _allocator(repo).allocate_next()
        assert first == second == "INV-2026-0005"


class TestParse:

    def test_well_formed(self):
        allocator = _allocator(FakeCounterRepository())
        assert allocator.parse("INV-2026-0042") == InvoiceNumber(year=2026, sequence=42)

    def test_rejects_other_shapes(self):
        allocator = _allocator(FakeCounterRepository())
        for invoice_id in ("INV-1768599000", "INV-2026-42", "XINV-2026-0001", "INV-2026-00011", "inv-2026-0001"):
            assert allocator.parse(invoice_id) is None
            assert not allocator.is_valid_format(invoice_id)

    def test_prefix_is_literal(self):
        allocator = _allocator(FakeCounterRepository(), prefix="A.B")
        assert allocator.parse("AxB-2026-0001") is None
        assert allocator.is_valid_format("A.B-2026-0001")
