from __future__ import annotations

import pytest

from fx_forecast.errors import (
    ErrorKind,
    InvalidCurrencyError,
    UnknownCurrencyError,
    UnsupportedOriginError,
)
from fx_forecast.utils.currency import (
    CURRENCIES,
    get_currency,
    normalise_code,
    supported_destinations,
)


@pytest.mark.parametrize("raw, expected", [("usd", "USD"), (" eur ", "EUR"), ("Cop", "COP")])
def test_normalise_code_uppercases_and_strips(raw: str, expected: str) -> None:
    assert normalise_code(raw) == expected


@pytest.mark.parametrize("raw", ["", "US", "USDX", "U5D", "ÜSD", None, 840])
def test_normalise_code_rejects_malformed_codes(raw) -> None:
    with pytest.raises(InvalidCurrencyError):
        normalise_code(raw)


def test_get_currency_returns_catalogue_entry() -> None:
    currency = get_currency("cop")

    assert currency.code == "COP"
    assert currency.country == "Colombia"
    assert currency.to_payload() == {"code": "COP", "country": "Colombia"}


def test_get_currency_unknown_code() -> None:
    with pytest.raises(UnknownCurrencyError) as excinfo:
        get_currency("XYZ")

    assert str(excinfo.value) == "currency code XYZ not found"
    assert excinfo.value.kind is ErrorKind.UNKNOWN_CURRENCY


def test_supported_destinations_for_base_currency() -> None:
    destinations = supported_destinations("eur")
    codes = [currency.code for currency in destinations]

    assert "EUR" not in codes
    assert codes == sorted(codes)
    assert set(codes) == set(CURRENCIES) - {"EUR"}


def test_supported_destinations_rejects_other_origins() -> None:
    with pytest.raises(UnsupportedOriginError) as excinfo:
        supported_destinations("USD")

    assert excinfo.value.supported == "EUR"
    assert excinfo.value.http_status == 400
