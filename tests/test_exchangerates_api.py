"""Historical client tests against a stubbed requests session."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
import requests

from fx_forecast.errors import RateSourceError
from fx_forecast.ingestion.exchangerates_api import ExchangeRatesAPIClient

_MISSING = object()


class DummyResponse:
    def __init__(self, payload: Any = _MISSING, status_code: int = 200, reason: str = "OK") -> None:
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    def json(self) -> Any:
        if self._payload is _MISSING:
            raise ValueError("no json")
        return self._payload


class DummySession:
    def __init__(self, response: DummyResponse | Exception) -> None:
        self.response = response
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, dict[str, Any], float]] = []
        self.closed = False

    def get(self, url: str, params: dict[str, Any] | None = None, timeout: float = 0) -> DummyResponse:
        self.calls.append((url, params or {}, timeout))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def close(self) -> None:
        self.closed = True


def _client(response: DummyResponse | Exception) -> tuple[ExchangeRatesAPIClient, DummySession]:
    session = DummySession(response)
    client = ExchangeRatesAPIClient(
        "secret", base_url="https://rates.test/v1/", timeout=7, session=session  # type: ignore[arg-type]
    )
    return client, session


def test_fetch_daily_rate_builds_dated_request() -> None:
    client, session = _client(
        DummyResponse({"success": True, "base": "EUR", "rates": {"COP": 4250.5}})
    )

    rate = client.fetch_daily_rate("EUR", "COP", date(2024, 1, 2))

    assert rate == 4250.5
    url, params, timeout = session.calls[0]
    assert url == "https://rates.test/v1/2024-01-02"
    assert params == {"access_key": "secret", "base": "EUR", "symbols": "COP"}
    assert timeout == 7
    assert client.source_label == "api.exchangeratesapi.io"
    assert client.fixed_base == "EUR"


def test_integer_rates_are_returned_as_floats() -> None:
    client, _ = _client(DummyResponse({"rates": {"JPY": 160}}))

    rate = client.fetch_daily_rate("EUR", "JPY", date(2024, 1, 2))

    assert rate == 160.0
    assert isinstance(rate, float)


@pytest.mark.parametrize(
    "response, message",
    [
        (DummyResponse({"rates": {}}, status_code=500, reason="Server Error"), "unexpected status code: 500"),
        (DummyResponse(), "error decoding response body"),
        (DummyResponse(["not", "a", "dict"]), "unexpected response body"),
        (
            DummyResponse({"success": False, "error": {"code": 101, "info": "invalid key"}}),
            "invalid key",
        ),
        (DummyResponse({"rates": {"USD": 1.1}}), "no rate for COP"),
        (DummyResponse({"rates": {"COP": "4250"}}), "no rate for COP"),
        (DummyResponse({"rates": {"COP": True}}), "no rate for COP"),
        (DummyResponse({"rates": {"COP": 0}}), "non-positive or non-finite rate"),
        (DummyResponse({"rates": {"COP": float("nan")}}), "non-finite rate"),
        (DummyResponse({"rates": {"COP": float("inf")}}), "non-finite rate"),
    ],
)
def test_fetch_daily_rate_failures(response: DummyResponse, message: str) -> None:
    client, _ = _client(response)

    with pytest.raises(RateSourceError, match=message):
        client.fetch_daily_rate("EUR", "COP", date(2024, 1, 2))


def test_status_code_is_kept_on_error() -> None:
    client, _ = _client(DummyResponse(status_code=429, reason="Too Many Requests"))

    with pytest.raises(RateSourceError) as excinfo:
        client.fetch_daily_rate("EUR", "USD", date(2024, 1, 2))

    assert excinfo.value.status_code == 429


def test_transport_errors_are_wrapped() -> None:
    client, _ = _client(requests.ConnectionError("refused"))

    with pytest.raises(RateSourceError, match="error when getting the historical data") as excinfo:
        client.fetch_daily_rate("EUR", "USD", date(2024, 1, 2))

    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_context_manager_closes_session() -> None:
    client, session = _client(DummyResponse({"rates": {"USD": 1.1}}))

    with client as active:
        assert active is client

    assert session.closed
