"""Abstract source of the region tax table."""

from __future__ import annotations

from abc import ABC, abstractmethod

from invoicing.domain.model.tax_table import TaxTable


class TaxTableSource(ABC):

    @abstractmethod
    def load(self) -> TaxTable:
        """Return the tax table; raise ConfigurationError if unusable."""
