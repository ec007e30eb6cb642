"""Exception hierarchy shared across the fx_forecast package.

Every error carries a machine-readable :class:`ErrorKind`, a human readable
``detail`` and an HTTP status hint so that an outer request-handling layer can
render failures without inspecting exception types.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    """Tags used when failures cross the library boundary."""

    FUTURE_DATE = "FUTURE_DATE"
    INVERTED_RANGE = "INVERTED_RANGE"
    RANGE_TOO_WIDE = "RANGE_TOO_WIDE"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    SERIES_FETCH_FAILED = "SERIES_FETCH_FAILED"
    CANCELLED = "CANCELLED"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    DEGENERATE_TREND = "DEGENERATE_TREND"
    RATE_UNAVAILABLE = "RATE_UNAVAILABLE"
    INVALID_CURRENCY = "INVALID_CURRENCY"
    UNKNOWN_CURRENCY = "UNKNOWN_CURRENCY"
    UNSUPPORTED_ORIGIN = "UNSUPPORTED_ORIGIN"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    FAVORITE_EXISTS = "FAVORITE_EXISTS"
    INVALID_REQUEST = "INVALID_REQUEST"
    EMAIL_FAILED = "EMAIL_FAILED"
    CONFIGURATION = "CONFIGURATION"


_HTTP_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.FUTURE_DATE: 400,
    ErrorKind.INVERTED_RANGE: 400,
    ErrorKind.RANGE_TOO_WIDE: 400,
    ErrorKind.INVALID_DATE_FORMAT: 400,
    ErrorKind.SERIES_FETCH_FAILED: 502,
    ErrorKind.CANCELLED: 408,
    ErrorKind.INSUFFICIENT_DATA: 422,
    ErrorKind.DEGENERATE_TREND: 422,
    ErrorKind.RATE_UNAVAILABLE: 502,
    ErrorKind.INVALID_CURRENCY: 400,
    ErrorKind.UNKNOWN_CURRENCY: 400,
    ErrorKind.UNSUPPORTED_ORIGIN: 400,
    ErrorKind.INVALID_AMOUNT: 400,
    ErrorKind.FAVORITE_EXISTS: 409,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.EMAIL_FAILED: 500,
    ErrorKind.CONFIGURATION: 500,
}


class FxForecastError(Exception):
    """Base class for every failure raised by the package."""

    kind: ErrorKind = ErrorKind.INVALID_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail
        self.stage: str | None = None

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.kind, 500)

    def with_stage(self, stage: str) -> "FxForecastError":
        """Record which pipeline stage produced the error and return ``self``."""

        self.stage = stage
        return self

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": self.detail,
            "code": self.kind.value,
            "status": self.http_status,
        }
        if self.stage is not None:
            payload["stage"] = self.stage
        return payload


class ConfigurationError(FxForecastError):
    kind = ErrorKind.CONFIGURATION


class InvalidDateError(FxForecastError):
    kind = ErrorKind.INVALID_DATE_FORMAT


class DateRangeError(FxForecastError):
    """Base class for date range policy violations."""


class FutureDateError(DateRangeError):
    kind = ErrorKind.FUTURE_DATE

    def __init__(self, start: date, end: date, today: date) -> None:
        super().__init__(
            f"start date {start} and end date {end} must not be after the current date {today}"
        )
        self.start = start
        self.end = end
        self.today = today


class InvertedRangeError(DateRangeError):
    kind = ErrorKind.INVERTED_RANGE

    def __init__(self, start: date, end: date) -> None:
        super().__init__(f"start date {start} must not be after end date {end}")
        self.start = start
        self.end = end


class RangeTooWideError(DateRangeError):
    kind = ErrorKind.RANGE_TOO_WIDE

    def __init__(self, start: date, end: date, max_span_days: int) -> None:
        span = (end - start).days
        super().__init__(
            f"the difference between start date and end date must not be greater than "
            f"{max_span_days} days (got {span})"
        )
        self.start = start
        self.end = end
        self.max_span_days = max_span_days
        self.span_days = span


class RateSourceError(FxForecastError):
    """A single provider call failed (transport, status or malformed body)."""

    kind = ErrorKind.RATE_UNAVAILABLE

    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.status_code = status_code


class SeriesFetchError(FxForecastError):
    kind = ErrorKind.SERIES_FETCH_FAILED

    def __init__(self, rate_date: date, reason: str) -> None:
        super().__init__(f"unable to fetch the rate for {rate_date.isoformat()}: {reason}")
        self.rate_date = rate_date


class SeriesCancelledError(FxForecastError):
    kind = ErrorKind.CANCELLED

    def __init__(self, rate_date: date, reason: str = "cancelled") -> None:
        super().__init__(f"series retrieval {reason} before {rate_date.isoformat()}")
        self.rate_date = rate_date


class InsufficientDataError(FxForecastError):
    kind = ErrorKind.INSUFFICIENT_DATA

    def __init__(self, required: int, actual: int) -> None:
        super().__init__(
            f"insufficient historical data for forecast (need at least {required} days, got {actual})"
        )
        self.required = required
        self.actual = actual


class DegenerateTrendError(FxForecastError):
    kind = ErrorKind.DEGENERATE_TREND


class InvalidCurrencyError(FxForecastError):
    kind = ErrorKind.INVALID_CURRENCY


class UnknownCurrencyError(FxForecastError):
    kind = ErrorKind.UNKNOWN_CURRENCY

    def __init__(self, code: str) -> None:
        super().__init__(f"currency code {code} not found")
        self.code = code


class UnsupportedOriginError(FxForecastError):
    kind = ErrorKind.UNSUPPORTED_ORIGIN

    def __init__(self, origin: str, supported: str) -> None:
        super().__init__(
            f"origin currency {origin} not supported; the provider only serves {supported}"
        )
        self.origin = origin
        self.supported = supported


class InvalidAmountError(FxForecastError):
    kind = ErrorKind.INVALID_AMOUNT


class FavoriteExistsError(FxForecastError):
    kind = ErrorKind.FAVORITE_EXISTS


class InvalidFavoriteError(FxForecastError):
    kind = ErrorKind.INVALID_REQUEST


class NotificationError(FxForecastError):
    kind = ErrorKind.EMAIL_FAILED


__all__ = [
    "ErrorKind",
    "FxForecastError",
    "ConfigurationError",
    "InvalidDateError",
    "DateRangeError",
    "FutureDateError",
    "InvertedRangeError",
    "RangeTooWideError",
    "RateSourceError",
    "SeriesFetchError",
    "SeriesCancelledError",
    "InsufficientDataError",
    "DegenerateTrendError",
    "InvalidCurrencyError",
    "UnknownCurrencyError",
    "UnsupportedOriginError",
    "InvalidAmountError",
    "FavoriteExistsError",
    "InvalidFavoriteError",
    "NotificationError",
]
