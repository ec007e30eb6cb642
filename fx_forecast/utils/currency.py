"""Currency code helpers and the static currency catalogue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from fx_forecast.errors import InvalidCurrencyError, UnknownCurrencyError, UnsupportedOriginError

PROVIDER_BASE_CURRENCY = "EUR"


@dataclass(frozen=True, slots=True)
class Currency:
    """A currency code together with the country (or area) that issues it."""

    code: str
    country: str

    def to_payload(self) -> Dict[str, str]:
        return {"code": self.code, "country": self.country}


CURRENCIES: Dict[str, Currency] = {
    currency.code: currency
    for currency in (
        Currency("EUR", "Eurozone"),
        Currency("USD", "United States"),
        Currency("COP", "Colombia"),
        Currency("GBP", "United Kingdom"),
        Currency("JPY", "Japan"),
        Currency("CHF", "Switzerland"),
        Currency("CAD", "Canada"),
        Currency("MXN", "Mexico"),
        Currency("BRL", "Brazil"),
        Currency("INR", "India"),
    )
}


def normalise_code(code: str) -> str:
    """Return ``code`` stripped and upper-cased, rejecting anything not ISO-like."""

    if not isinstance(code, str):
        raise InvalidCurrencyError(f"Invalid currency code: {code!r}")
    cleaned = code.strip().upper()
    if len(cleaned) != 3 or not cleaned.isalpha() or not cleaned.isascii():
        raise InvalidCurrencyError(
            f"Invalid currency code: {code!r}. Expect a 3-letter ISO code."
        )
    return cleaned


def get_currency(code: str) -> Currency:
    """Look up catalogue metadata for ``code``."""

    normalised = normalise_code(code)
    try:
        return CURRENCIES[normalised]
    except KeyError:
        raise UnknownCurrencyError(normalised) from None


def supported_destinations(origin: str, *, base: str = PROVIDER_BASE_CURRENCY) -> List[Currency]:
    """Return the destinations reachable from ``origin``, sorted by code.

    Only the provider's fixed base is a supported origin.
    """

    origin_currency = get_currency(origin)
    if origin_currency.code != base:
        raise UnsupportedOriginError(origin_currency.code, base)
    return sorted(
        (currency for code, currency in CURRENCIES.items() if code != origin_currency.code),
        key=lambda currency: currency.code,
    )


__all__ = [
    "PROVIDER_BASE_CURRENCY",
    "CURRENCIES",
    "Currency",
    "get_currency",
    "normalise_code",
    "supported_destinations",
]
