"""Trailing-window forecast orchestration."""

from __future__ import annotations

import threading
from datetime import date
from typing import Callable

from fx_forecast.errors import FxForecastError
from fx_forecast.forecast.estimator import ForecastEstimator
from fx_forecast.ingestion.models import ForecastResult
from fx_forecast.ingestion.series_builder import HistoricalSeriesBuilder
from fx_forecast.utils.date_range import TRAILING_WINDOW_DAYS, trailing_window
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)


class ForecastPipeline:
    """Fetch the five days ending yesterday and estimate tomorrow's rate."""

    def __init__(
        self,
        builder: HistoricalSeriesBuilder,
        estimator: ForecastEstimator | None = None,
        *,
        window_days: int = TRAILING_WINDOW_DAYS,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.builder = builder
        self.estimator = estimator or ForecastEstimator(clock=clock)
        self.window_days = window_days
        self._clock = clock

    def forecast(
        self,
        origin: str,
        destination: str,
        *,
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
    ) -> ForecastResult:
        window = trailing_window(self._clock(), self.window_days)
        LOGGER.info(
            "Forecasting %s/%s from %s to %s", origin, destination, window.start, window.end
        )
        try:
            series = self.builder.build_series(
                origin, destination, window, cancel_event=cancel_event, deadline=deadline
            )
        except FxForecastError as exc:
            raise exc.with_stage("history")

        try:
            result = self.estimator.estimate(series)
        except FxForecastError as exc:
            raise exc.with_stage("estimate")

        LOGGER.info(
            "Forecast for %s/%s on %s: %.6f (confidence %.2f)",
            result.origin,
            result.destination,
            result.predicted_date,
            result.predicted_rate,
            result.confidence,
        )
        return result


__all__ = ["ForecastPipeline"]
