"""Historical daily rates from api.exchangeratesapi.io."""

from __future__ import annotations

from datetime import date
import math
from numbers import Real
from typing import Any

import requests

from fx_forecast.config import DEFAULT_EXCHANGE_RATES_URL, DEFAULT_TIMEOUT_SECONDS
from fx_forecast.errors import RateSourceError
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)

SOURCE_LABEL = "api.exchangeratesapi.io"
# The free plan ignores ``base`` and always quotes against EUR.
FIXED_BASE = "EUR"


class ExchangeRatesAPIClient:
    """One-request-per-day client for the ``/v1/{date}`` historical endpoint."""

    source_label = SOURCE_LABEL
    fixed_base: str | None = FIXED_BASE

    def __init__(
        self,
        access_key: str,
        *,
        base_url: str = DEFAULT_EXCHANGE_RATES_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.access_key = access_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", "fx-forecast/1.0")
        self.session.headers.setdefault("Accept", "application/json")

    def fetch_daily_rate(self, base: str, quote: str, rate_date: date) -> float:
        """Return the ``base``→``quote`` rate published for ``rate_date``."""

        url = f"{self.base_url}/{rate_date.isoformat()}"
        params = {"access_key": self.access_key, "base": base, "symbols": quote}
        LOGGER.debug("Fetching %s/%s for %s", base, quote, rate_date)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RateSourceError(
                f"error when getting the historical data for {base} to {quote}, date: {rate_date}"
            ) from exc
        self._raise_with_context(response, rate_date)
        return self._extract_rate(response, quote, rate_date)

    @staticmethod
    def _raise_with_context(response: requests.Response, rate_date: date) -> None:
        if response.status_code != 200:
            raise RateSourceError(
                f"unexpected status code: {response.status_code} {response.reason} for {rate_date}",
                status_code=response.status_code,
            )

    @staticmethod
    def _extract_rate(response: requests.Response, quote: str, rate_date: date) -> float:
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise RateSourceError(f"error decoding response body for {rate_date}") from exc
        if not isinstance(payload, dict):
            raise RateSourceError(f"unexpected response body for {rate_date}")
        if payload.get("success") is False:
            error = payload.get("error")
            info = error.get("info") if isinstance(error, dict) else error
            raise RateSourceError(f"API error for {rate_date}: {info or 'unknown error'}")
        rates = payload.get("rates")
        value = rates.get(quote) if isinstance(rates, dict) else None
        if isinstance(value, bool) or not isinstance(value, Real):
            raise RateSourceError(f"response for {rate_date} has no rate for {quote}")
        rate = float(value)
        if not math.isfinite(rate) or rate <= 0:
            raise RateSourceError(f"response for {rate_date} has non-positive or non-finite rate {rate} for {quote}")
        return rate

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ExchangeRatesAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["ExchangeRatesAPIClient", "SOURCE_LABEL", "FIXED_BASE"]
