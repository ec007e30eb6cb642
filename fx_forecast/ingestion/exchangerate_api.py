"""Live pair rates and conversions from v6.exchangerate-api.com."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any

import requests

from fx_forecast.config import DEFAULT_EXCHANGE_RATE_URL, DEFAULT_TIMEOUT_SECONDS
from fx_forecast.errors import InvalidAmountError, RateSourceError
from fx_forecast.ingestion.models import ConversionResult
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)

SOURCE_LABEL = "exchange-rate-api"


class ExchangeRateAPIClient:
    """Client for the ``/pair`` endpoint; the API key is part of the URL path."""

    source_label = SOURCE_LABEL

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_EXCHANGE_RATE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", "fx-forecast/1.0")

    def fetch_rate(self, origin: str, destination: str) -> float:
        url = f"{self.base_url}/{self.api_key}/pair/{origin}/{destination}"
        payload = self._get(url, origin, destination)
        return self._number(payload, "conversion_rate")

    def convert(self, origin: str, destination: str, amount: float) -> ConversionResult:
        """Convert ``amount`` of ``origin`` into ``destination`` at the current rate."""

        if (
            isinstance(amount, bool)
            or not isinstance(amount, Real)
            or not math.isfinite(amount)
            or amount <= 0
        ):
            raise InvalidAmountError(
                f"Invalid amount {amount!r}; it must be a finite number greater than 0"
            )
        url = f"{self.base_url}/{self.api_key}/pair/{origin}/{destination}/{float(amount):.3f}"
        payload = self._get(url, origin, destination)
        result = ConversionResult(
            origin=origin,
            destination=destination,
            amount=float(amount),
            rate=self._number(payload, "conversion_rate"),
            converted_amount=self._number(payload, "conversion_result"),
            source=self.source_label,
        )
        LOGGER.info(
            "Converted %s %s to %s %s at %s",
            amount,
            origin,
            result.converted_amount,
            destination,
            result.rate,
        )
        return result

    def _get(self, url: str, origin: str, destination: str) -> dict[str, Any]:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RateSourceError(
                f"error when getting the conversion rate for {origin} to {destination}"
            ) from exc
        if response.status_code != 200:
            raise RateSourceError(
                f"unexpected status code: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RateSourceError("error decoding response body") from exc
        if not isinstance(payload, dict):
            raise RateSourceError("unexpected response body")
        if payload.get("result") == "error":
            raise RateSourceError(f"API error: {payload.get('error-type', 'unknown error')}")
        return payload

    @staticmethod
    def _number(payload: dict[str, Any], key: str) -> float:
        value = payload.get(key)
        if isinstance(value, bool) or not isinstance(value, Real):
            raise RateSourceError(f"response body has no numeric {key}")
        number = float(value)
        if not math.isfinite(number) or number <= 0:
            raise RateSourceError(f"response body has non-positive or non-finite {key} {number}")
        return number

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ExchangeRateAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["ExchangeRateAPIClient", "SOURCE_LABEL"]
