"""Trend and dispersion based next-day rate estimator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from fx_forecast.errors import DegenerateTrendError, InsufficientDataError
from fx_forecast.ingestion.models import ForecastResult, RateSeries

MIN_POINTS = 3
BASE_CONFIDENCE = 0.5
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.9
TREND_DAMPING = 0.5

# (upper bound on coefficient of variation, bonus), checked in order.
DISPERSION_BONUSES: tuple[tuple[float, float], ...] = ((0.05, 0.3), (0.10, 0.2), (0.20, 0.1))


@dataclass(frozen=True, slots=True)
class SeriesStatistics:
    average: float
    std_dev: float
    first_half_average: float
    second_half_average: float
    trend: float

    @property
    def coefficient_of_variation(self) -> float:
        return self.std_dev / self.average if self.std_dev > 0 else 0.0


class ForecastEstimator:
    """Project a rate series one day forward.

    The estimate is the series average nudged by half of the relative change
    between the second and first half of the series. Confidence starts at 0.5,
    rises for low dispersion and longer samples, and is clamped to
    ``[0.3, 0.9]``.
    """

    def __init__(self, *, clock: Callable[[], date] = date.today) -> None:
        self._clock = clock

    def estimate(self, series: RateSeries) -> ForecastResult:
        if len(series) < MIN_POINTS:
            raise InsufficientDataError(required=MIN_POINTS, actual=len(series))

        stats = compute_statistics(series)
        predicted_rate = stats.average + stats.average * stats.trend * TREND_DAMPING
        if predicted_rate <= 0:
            predicted_rate = stats.average

        return ForecastResult(
            origin=series.origin,
            destination=series.destination,
            predicted_date=self._clock() + timedelta(days=1),
            predicted_rate=predicted_rate,
            confidence=score_confidence(stats, len(series)),
            trailing_average=stats.average,
            source=series.source,
            base_substituted=series.base_substituted,
        )


def compute_statistics(series: RateSeries) -> SeriesStatistics:
    """Return average, population standard deviation and half-over-half trend."""

    rates = series.to_frame()["rate"]
    average = float(rates.mean())
    variance = float(((rates - average) ** 2).mean())
    midpoint = len(rates) // 2
    first_half_average = float(rates.iloc[:midpoint].mean())
    second_half_average = float(rates.iloc[midpoint:].mean())

    if first_half_average == 0:
        raise DegenerateTrendError("first half of the series averages to zero; trend is undefined")
    if average == 0:
        raise DegenerateTrendError("series averages to zero; dispersion is undefined")

    return SeriesStatistics(
        average=average,
        std_dev=math.sqrt(variance),
        first_half_average=first_half_average,
        second_half_average=second_half_average,
        trend=(second_half_average - first_half_average) / first_half_average,
    )


def score_confidence(stats: SeriesStatistics, sample_size: int) -> float:
    confidence = BASE_CONFIDENCE
    cv = stats.coefficient_of_variation
    for upper_bound, bonus in DISPERSION_BONUSES:
        if cv < upper_bound:
            confidence += bonus
            break

    if sample_size >= 5:
        confidence += 0.1
    elif sample_size == 4:
        confidence += 0.05

    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))


__all__ = ["ForecastEstimator", "SeriesStatistics", "compute_statistics", "score_confidence"]
