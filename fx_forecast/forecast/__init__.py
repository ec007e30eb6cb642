"""Forecasting over trailing rate windows."""

from fx_forecast.forecast.estimator import ForecastEstimator
from fx_forecast.forecast.pipeline import ForecastPipeline

__all__ = ["ForecastEstimator", "ForecastPipeline"]
