"""Read-only region to tax rate mapping.

Shape: ``{COUNTRY: {STATE: rate, "default": rate}}``. Country and state
keys are upper-cased on construction so lookups are case-insensitive.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from invoicing.domain.exceptions import ConfigurationError, ValidationError
from invoicing.domain.model.value_objects import to_decimal

DEFAULT_KEY = "default"


@dataclass(frozen=True)
class TaxTable:

    rates: Mapping[str, Mapping[str, Decimal]]

    @staticmethod
    def from_mapping(raw: Any) -> TaxTable:
        """Validate and normalise a decoded tax configuration."""
        if not isinstance(raw, Mapping):
            raise ConfigurationError("Tax table must be a JSON object of countries")

        rates: dict[str, dict[str, Decimal]] = {}
        for country, states in raw.items():
            if not isinstance(states, Mapping):
                raise ConfigurationError(
                    f"Tax table entry for '{country}' must be an object of rates"
                )
            country_rates: dict[str, Decimal] = {}
            for state, rate in states.items():
                key = DEFAULT_KEY if state.lower() == DEFAULT_KEY else state.upper()
                try:
                    value = to_decimal(rate)
                except ValidationError as exc:
                    raise ConfigurationError(
                        f"Invalid tax rate for {country}-{state}: {rate!r}"
                    ) from exc
                if not value.is_finite() or value < 0:
                    raise ConfigurationError(
                        f"Invalid tax rate for {country}-{state}: {rate!r}"
                    )
                country_rates[key] = value
            rates[country.upper()] = country_rates
        return TaxTable(rates)

    def lookup(self, region_code: str) -> Decimal | None:
        """Resolve a rate for ``COUNTRY`` or ``COUNTRY-STATE``.

        Order: exact state, then the country default, then the first
        ``default`` anywhere in the table. That last step is not a
        regional fallback: an unknown country picks up whichever default
        happens to come first. Returns None when nothing resolves.
        """
        country, state = parse_region(region_code)
        country_rates = self.rates.get(country)
        if country_rates is not None:
            if state and state in country_rates:
                return country_rates[state]
            if DEFAULT_KEY in country_rates:
                return country_rates[DEFAULT_KEY]

        for any_rates in self.rates.values():
            if DEFAULT_KEY in any_rates:
                return any_rates[DEFAULT_KEY]
        return None

    def regions(self) -> list[str]:
        """Every ``COUNTRY-STATE`` pair followed by its ``COUNTRY``."""
        result: list[str] = []
        for country, country_rates in self.rates.items():
            for state in country_rates:
                if state != DEFAULT_KEY:
                    result.append(f"{country}-{state}")
            result.append(country)
        return result


def parse_region(region_code: str) -> tuple[str, str | None]:
    """Split ``us-ca`` into ``("US", "CA")``; the state is optional."""
    if not isinstance(region_code, str):
        raise ValidationError(f"Region code must be a string, got {region_code!r}")
    parts = region_code.strip().split("-")
    country = parts[0].upper()
    state = parts[1].upper() if len(parts) > 1 and parts[1] else None
    return country, state
