"""JSON-file-backed implementation of TaxTableSource."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from invoicing.domain.exceptions import ConfigurationError
from invoicing.domain.model.tax_table import TaxTable
from invoicing.domain.repository.tax_table_source import TaxTableSource


class JsonTaxTableSource(TaxTableSource):
    """Reads the table on every ``load`` so edits apply without a restart."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def load(self) -> TaxTable:
        if not self._file_path.exists():
            raise ConfigurationError(f"Tax rates file not found: {self._file_path}")
        try:
            raw = json.loads(
                self._file_path.read_text(encoding="utf-8"),
                parse_float=Decimal,
            )
        except OSError as exc:
            raise ConfigurationError(
                f"Tax rates file could not be read: {self._file_path}"
            ) from exc
        except UnicodeDecodeError as exc:
            raise ConfigurationError(
                f"Tax rates file is not valid UTF-8: {self._file_path}"
            ) from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Invalid tax rates JSON in file: {self._file_path}"
            ) from exc
        return TaxTable.from_mapping(raw)
