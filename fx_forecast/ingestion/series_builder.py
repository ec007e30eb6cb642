"""Sequential, rate-limited retrieval of daily rate series."""

from __future__ import annotations

import threading
import time
from datetime import date
from typing import Callable

from fx_forecast.config import DEFAULT_REQUEST_DELAY_SECONDS
from fx_forecast.errors import RateSourceError, SeriesCancelledError, SeriesFetchError
from fx_forecast.ingestion.models import RatePoint, RateSeries
from fx_forecast.ingestion.strategy import BasePolicy, RateSource, resolve_origin
from fx_forecast.utils.currency import normalise_code
from fx_forecast.utils.date_range import MAX_SPAN_DAYS, DateRange, validate_range
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)


class HistoricalSeriesBuilder:
    """Validate a date range and fetch it one day at a time.

    Calls to the source are strictly sequential with ``delay_seconds`` between
    consecutive requests; the provider rate-limits bursts, so the days are never
    fetched in parallel. A failure on any day aborts the whole series.
    """

    def __init__(
        self,
        source: RateSource,
        *,
        delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS,
        max_span_days: int = MAX_SPAN_DAYS,
        base_policy: BasePolicy = BasePolicy.REJECT,
        clock: Callable[[], date] = date.today,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        self.source = source
        self.delay_seconds = delay_seconds
        self.max_span_days = max_span_days
        self.base_policy = base_policy
        self._clock = clock
        self._sleep = sleep

    def build_series(
        self,
        origin: str,
        destination: str,
        date_range: DateRange,
        *,
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
    ) -> RateSeries:
        """Return one :class:`RatePoint` per day of ``date_range`` in ascending order.

        ``cancel_event`` and ``deadline`` (a :func:`time.monotonic` timestamp) are
        checked before every request; setting the event also interrupts the
        wait between requests.
        """

        validate_range(date_range, self._clock(), max_span_days=self.max_span_days)
        requested_origin = normalise_code(origin)
        quote = normalise_code(destination)
        base, substituted = resolve_origin(
            requested_origin, getattr(self.source, "fixed_base", None), self.base_policy
        )

        LOGGER.info(
            "Fetching %s/%s rates from %s to %s", base, quote, date_range.start, date_range.end
        )
        points: list[RatePoint] = []
        for index, rate_date in enumerate(date_range.days()):
            if index:
                self._wait(rate_date, cancel_event)
            self._check_cancelled(rate_date, cancel_event, deadline)
            try:
                rate = self.source.fetch_daily_rate(base, quote, rate_date)
            except RateSourceError as exc:
                LOGGER.error("Fetching %s/%s for %s failed: %s", base, quote, rate_date, exc)
                raise SeriesFetchError(rate_date, exc.detail) from exc
            points.append(RatePoint(rate_date=rate_date, rate=rate))

        LOGGER.info("Fetched %s daily rates for %s/%s", len(points), base, quote)
        return RateSeries(
            origin=base,
            destination=quote,
            points=points,
            source=self.source.source_label,
            requested_origin=requested_origin,
            base_substituted=substituted,
        )

    def _wait(self, next_date: date, cancel_event: threading.Event | None) -> None:
        if cancel_event is not None:
            if cancel_event.wait(self.delay_seconds):
                raise SeriesCancelledError(next_date)
            return
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

    @staticmethod
    def _check_cancelled(
        next_date: date, cancel_event: threading.Event | None, deadline: float | None
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise SeriesCancelledError(next_date)
        if deadline is not None and time.monotonic() >= deadline:
            raise SeriesCancelledError(next_date, "deadline exceeded")


__all__ = ["HistoricalSeriesBuilder"]
