"""Tests for the RenderInvoice use case."""

import logging

import pytest

from invoicing.application.render_invoice import RenderInvoiceHandler
from invoicing.domain.exceptions import NotFoundError, ValidationError
from invoicing.domain.model.invoice import Invoice
from tests.fakes import FakeInvoiceRepository, FakeRenderer, make_allocator


@pytest.fixture
def invoice_repo() -> FakeInvoiceRepository:
    repo = FakeInvoiceRepository()
    invoice = Invoice.create("Alice", make_allocator())
    invoice.add_item("Widget", "10.00", 1)
    repo.save(invoice)
    return repo


class TestRenderInvoice:

    def test_pdf(self, invoice_repo):
        renderer = FakeRenderer()
        result = RenderInvoiceHandler(invoice_repo, renderer).handle("INV-2026-0001")
        assert result.ok
        assert result.format == "pdf"
        assert result.path.endswith("invoice_INV-2026-0001.pdf")
        assert renderer.calls == [("pdf", "INV-2026-0001")]

    def test_html(self, invoice_repo):
        renderer = FakeRenderer()
        result = RenderInvoiceHandler(invoice_repo, renderer).handle("INV-2026-0001", fmt="HTML")
        assert result.format == "html"
        assert renderer.calls == [("html", "INV-2026-0001")]

    def test_falls_back_to_html_when_pdf_unavailable(self, invoice_repo, caplog):
        renderer = FakeRenderer(available=False)
        with caplog.at_level(logging.WARNING):
            result = RenderInvoiceHandler(invoice_repo, renderer).handle("INV-2026-0001")
        assert result.ok
        assert result.format == "html"
        assert "exporting HTML instead" in caplog.text

    def test_failure_is_reported_not_raised(self, invoice_repo, caplog):
        renderer = FakeRenderer(fail=True)
        before = invoice_repo.load("INV-2026-0001").to_record()
        with caplog.at_level(logging.ERROR):
            result = RenderInvoiceHandler(invoice_repo, renderer).handle("INV-2026-0001")

        assert not result.ok
        assert result.path is None
        assert "renderer exploded" in result.error
        assert "Document generation failed" in caplog.text
        assert invoice_repo.load("INV-2026-0001").to_record() == before

    def test_unknown_format_rejected(self, invoice_repo):
        with pytest.raises(ValidationError, match="Unsupported format"):
            RenderInvoiceHandler(invoice_repo, FakeRenderer()).handle("INV-2026-0001", fmt="docx")

    def test_missing_invoice_propagates(self, invoice_repo):
        with pytest.raises(NotFoundError):
            RenderInvoiceHandler(invoice_repo, FakeRenderer()).handle("INV-2026-0404")
