"""JSON-file-backed implementation of InvoiceRepository.

The file holds either a single invoice object or a list of them. Every
``save`` reads the whole file, appends in memory and rewrites the whole
file. Nothing locks the read, so two writers working from the same
snapshot lose one of the appends.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from invoicing.domain.exceptions import NotFoundError, PersistenceError, ValidationError
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.repository.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    # --- InvoiceRepository interface ------------------------------------------

    def save(self, invoice: Invoice) -> None:
        records = self._load_for_append()

        if any(str(raw.get("id")) == invoice.id for raw in records if isinstance(raw, dict)):
            raise ValidationError(f"Invoice {invoice.id} already exists in {self._file_path}")

        records.append(invoice.to_record())
        self._persist_raw(records)

    def load(self, invoice_id: str) -> Invoice:
        for raw in self._load_for_read():
            if isinstance(raw, dict) and str(raw.get("id")) == invoice_id:
                return Invoice.from_record(raw)
        raise NotFoundError(f"Invoice not found: {invoice_id}")

    def list_all(self) -> list[Invoice]:
        if not self._file_path.exists():
            return []
        return [Invoice.from_record(raw) for raw in self._load_for_read()]

    # --- File helpers ---------------------------------------------------------

    def _load_for_append(self) -> list[Any]:
        if not self._file_path.exists():
            return []
        try:
            return _as_list(self._decode())
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "Invalid JSON in invoices file, starting fresh",
                extra={"context": {"filename": str(self._file_path), "error": str(exc)}},
            )
            return []

    def _load_for_read(self) -> list[Any]:
        if not self._file_path.exists():
            self._log_failure("load", "file does not exist")
            raise NotFoundError(f"Invoice file not found: {self._file_path}")
        try:
            return _as_list(self._decode())
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._log_failure("load", str(exc))
            raise NotFoundError(f"Invalid JSON in invoice file: {self._file_path}") from exc

    def _decode(self) -> Any:
        try:
            contents = self._file_path.read_text(encoding="utf-8")
        except OSError as exc:
            self._log_failure("read", str(exc))
            raise PersistenceError(f"Failed to read invoice file: {self._file_path}") from exc
        return json.loads(contents)

    def _persist_raw(self, records: list[Any]) -> None:
        try:
            payload = json.dumps(records, indent=2) + "\n"
        except (TypeError, ValueError) as exc:
            self._log_failure("save", str(exc))
            raise PersistenceError("Failed to encode invoice data to JSON") from exc
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            self._log_failure("save", str(exc))
            raise PersistenceError(f"Failed to write to file: {self._file_path}") from exc

    def _log_failure(self, operation: str, error: str) -> None:
        logger.error(
            "File operation failed: %s on %s",
            operation,
            self._file_path,
            extra={
                "context": {
                    "operation": operation,
                    "filename": str(self._file_path),
                    "error": error,
                }
            },
        )


def _as_list(decoded: Any) -> list[Any]:
    """Coerce the single-invoice file shape into a one-element list."""
    if isinstance(decoded, dict):
        return [decoded] if "id" in decoded else []
    if isinstance(decoded, list):
        return decoded
    return []
