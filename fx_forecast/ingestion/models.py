"""Data models shared across ingestion, forecasting and favorites modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List

import pandas as pd


@dataclass(frozen=True, slots=True)
class RatePoint:
    """Representation of a single daily rate returned by a provider."""

    rate_date: date
    rate: float

    def to_payload(self) -> Dict[str, Any]:
        return {"date": self.rate_date.isoformat(), "rate": self.rate}


@dataclass(slots=True)
class RateSeries:
    """Ordered daily rates for a currency pair, one point per calendar day."""

    origin: str
    destination: str
    points: List[RatePoint]
    source: str
    requested_origin: str | None = None
    base_substituted: bool = False

    def __post_init__(self) -> None:
        if self.requested_origin is None:
            self.requested_origin = self.origin

    def __len__(self) -> int:
        return len(self.points)

    @property
    def rates(self) -> List[float]:
        return [point.rate for point in self.points]

    @property
    def dates(self) -> List[date]:
        return [point.rate_date for point in self.points]

    @property
    def start(self) -> date | None:
        return self.points[0].rate_date if self.points else None

    @property
    def end(self) -> date | None:
        return self.points[-1].rate_date if self.points else None

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a ``DataFrame`` with a ``rate`` column indexed by date."""

        return pd.DataFrame(
            {"rate": self.rates},
            index=pd.Index(self.dates, name="rate_date"),
            dtype="float64",
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "requested_origin": self.requested_origin,
            "destination": self.destination,
            "start_date": self.start.isoformat() if self.start else None,
            "end_date": self.end.isoformat() if self.end else None,
            "rates": [point.to_payload() for point in self.points],
            "rates_source": self.source,
            "base_substituted": self.base_substituted,
        }


@dataclass(frozen=True, slots=True)
class ForecastResult:
    """Next-day estimate derived from a trailing rate series."""

    origin: str
    destination: str
    predicted_date: date
    predicted_rate: float
    confidence: float
    trailing_average: float
    source: str
    base_substituted: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "predicted_date": self.predicted_date.isoformat(),
            "predicted_rate": self.predicted_rate,
            "confidence": self.confidence,
            "trailing_average": self.trailing_average,
            "rates_source": self.source,
            "base_substituted": self.base_substituted,
        }


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Live conversion of ``amount`` units of ``origin`` into ``destination``."""

    origin: str
    destination: str
    amount: float
    rate: float
    converted_amount: float
    source: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "amount": self.amount,
            "rate": self.rate,
            "converted_amount": self.converted_amount,
            "rates_source": self.source,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(slots=True)
class Favorite:
    """A saved currency pair watched against a rate threshold."""

    id: str
    origin: str
    destination: str
    threshold: float
    notify_email: str
    created_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "origin": self.origin,
            "destination": self.destination,
            "threshold": self.threshold,
            "notify_email": self.notify_email,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class FavoriteCheckResult:
    favorite_id: str
    origin: str
    destination: str
    threshold: float
    current_rate: float
    check_date: date
    exceeded: bool
    notified: bool
    source: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "favorite_id": self.favorite_id,
            "origin": self.origin,
            "destination": self.destination,
            "threshold": self.threshold,
            "current_rate": self.current_rate,
            "date": self.check_date.isoformat(),
            "exceeded": self.exceeded,
            "notified": self.notified,
            "current_rate_source": self.source,
        }


@dataclass(slots=True)
class NotificationRequest:
    favorite_id: str
    origin: str
    destination: str
    threshold: float
    current_rate: float
    rate_date: date
    notify_email: str


@dataclass(frozen=True, slots=True)
class NotificationReceipt:
    message: str
    sent_to: str

    def to_payload(self) -> Dict[str, str]:
        return {"message": self.message, "sent_to": self.sent_to}
