"""Abstractions for pluggable rate sources."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Protocol

from fx_forecast.errors import UnsupportedOriginError
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)


class RateSource(Protocol):
    """Contract for retrieving one day's rate for a currency pair.

    Implementations perform exactly one outbound call per invocation and raise
    :class:`~fx_forecast.errors.RateSourceError` on any failure. ``fixed_base``
    names the only base currency the provider serves, or ``None`` when any base
    is accepted.
    """

    source_label: str
    fixed_base: str | None

    def fetch_daily_rate(self, base: str, quote: str, rate_date: date) -> float:
        ...  # pragma: no cover - protocol definition


class LiveRateSource(Protocol):
    """Contract for current (non-historical) pair rates."""

    source_label: str

    def fetch_rate(self, origin: str, destination: str) -> float:
        ...  # pragma: no cover - protocol definition


class BasePolicy(str, Enum):
    """What to do when the requested origin differs from a provider's fixed base."""

    REJECT = "reject"
    SUBSTITUTE = "substitute"


def resolve_origin(
    origin: str, fixed_base: str | None, policy: BasePolicy = BasePolicy.REJECT
) -> tuple[str, bool]:
    """Return ``(effective_origin, substituted)`` for a provider's base restriction."""

    if fixed_base is None or origin == fixed_base:
        return origin, False
    if policy is BasePolicy.SUBSTITUTE:
        LOGGER.warning(
            "Provider only serves %s as base; substituting it for requested origin %s",
            fixed_base,
            origin,
        )
        return fixed_base, True
    raise UnsupportedOriginError(origin, fixed_base)


__all__ = ["RateSource", "LiveRateSource", "BasePolicy", "resolve_origin"]
