"""Utility helpers for validating and walking provider-friendly date ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Tuple

from fx_forecast.errors import (
    FutureDateError,
    InvalidDateError,
    InvertedRangeError,
    RangeTooWideError,
)

MAX_SPAN_DAYS = 5
TRAILING_WINDOW_DAYS = 5


@dataclass(frozen=True)
class DateRange:
    """Container representing a closed date range."""

    start: date
    end: date

    @classmethod
    def from_values(cls, start: str | date, end: str | date) -> "DateRange":
        """Build a range from ISO strings or :class:`date` objects."""

        return cls(start=parse_date(start), end=parse_date(end))

    @property
    def span_days(self) -> int:
        return (self.end - self.start).days

    def as_tuple(self) -> Tuple[date, date]:
        """Return the range as a tuple of ``(start, end)``."""
        return (self.start, self.end)

    def days(self) -> Iterator[date]:
        """Yield every calendar day from ``start`` to ``end`` inclusive."""

        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)


def parse_date(value: str | date) -> date:
    """Parse a date string in ISO format to :class:`date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(f"Invalid date {value!r}. Use YYYY-MM-DD") from exc


def validate_range(
    date_range: DateRange, today: date, *, max_span_days: int = MAX_SPAN_DAYS
) -> DateRange:
    """Apply the retrieval policy to ``date_range`` and return it unchanged.

    Checks run in a fixed order and the first violation wins: future dates,
    then inverted bounds, then the maximum span.
    """

    if date_range.start > today or date_range.end > today:
        raise FutureDateError(date_range.start, date_range.end, today)
    if date_range.start > date_range.end:
        raise InvertedRangeError(date_range.start, date_range.end)
    if date_range.span_days > max_span_days:
        raise RangeTooWideError(date_range.start, date_range.end, max_span_days)
    return date_range


def trailing_window(today: date, days: int = TRAILING_WINDOW_DAYS) -> DateRange:
    """Return the ``days``-long window that ends the day before ``today``."""

    if days <= 0:
        raise ValueError("days must be positive")
    end = today - timedelta(days=1)
    return DateRange(start=end - timedelta(days=days - 1), end=end)
