"""Saving favorite pairs and checking them against live rates."""

from __future__ import annotations

import math
import re
import uuid
from datetime import date, datetime, timezone
from numbers import Real
from typing import Callable

from fx_forecast.db.base_backend import FavoriteBackend
from fx_forecast.errors import (
    ConfigurationError,
    FavoriteExistsError,
    InvalidFavoriteError,
    NotificationError,
    RateSourceError,
)
from fx_forecast.ingestion.models import Favorite, FavoriteCheckResult, NotificationRequest
from fx_forecast.ingestion.strategy import LiveRateSource
from fx_forecast.notifications.mailer import EmailNotifier
from fx_forecast.utils.currency import get_currency
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class FavoriteService:
    """Persist watched pairs and notify when a live rate reaches the threshold."""

    def __init__(
        self,
        backend: FavoriteBackend,
        live_source: LiveRateSource | None = None,
        notifier: EmailNotifier | None = None,
        *,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.backend = backend
        self.live_source = live_source
        self.notifier = notifier or EmailNotifier()
        self._clock = clock

    def save(
        self, origin: str, destination: str, threshold: float, notify_email: str
    ) -> Favorite:
        origin_code = get_currency(origin).code
        destination_code = get_currency(destination).code
        if (
            isinstance(threshold, bool)
            or not isinstance(threshold, Real)
            or not math.isfinite(threshold)
            or threshold <= 0
        ):
            raise InvalidFavoriteError("threshold must be a finite number greater than 0")
        email = (notify_email or "").strip()
        if not _EMAIL_PATTERN.match(email):
            raise InvalidFavoriteError(f"invalid notify_email {notify_email!r}")

        if self.backend.find_pair(origin_code, destination_code, email) is not None:
            raise FavoriteExistsError(
                f"favorite {origin_code}->{destination_code} already exists for {email}"
            )

        favorite = Favorite(
            id=str(uuid.uuid4()),
            origin=origin_code,
            destination=destination_code,
            threshold=float(threshold),
            notify_email=email,
            created_at=datetime.now(timezone.utc),
        )
        self.backend.insert_favorite(favorite)
        return favorite

    def list_favorites(self) -> list[Favorite]:
        return self.backend.fetch_all()

    def check(self) -> list[FavoriteCheckResult]:
        """Compare every favorite with its live rate, notifying on ``rate >= threshold``.

        Favorites whose rate cannot be fetched are skipped.
        """

        if self.live_source is None:
            raise ConfigurationError("checking favorites requires a live rate source")
        today = self._clock()
        results: list[FavoriteCheckResult] = []
        for favorite in self.backend.fetch_all():
            try:
                current_rate = self.live_source.fetch_rate(favorite.origin, favorite.destination)
            except RateSourceError as exc:
                LOGGER.warning(
                    "Skipping favorite %s (%s->%s): %s",
                    favorite.id,
                    favorite.origin,
                    favorite.destination,
                    exc,
                )
                continue

            exceeded = current_rate >= favorite.threshold
            notified = exceeded and self._notify(favorite, current_rate, today)
            results.append(
                FavoriteCheckResult(
                    favorite_id=favorite.id,
                    origin=favorite.origin,
                    destination=favorite.destination,
                    threshold=favorite.threshold,
                    current_rate=current_rate,
                    check_date=today,
                    exceeded=exceeded,
                    notified=notified,
                    source=self.live_source.source_label,
                )
            )
        LOGGER.info(
            "Checked %s favorites (%s exceeded)",
            len(results),
            sum(1 for result in results if result.exceeded),
        )
        return results

    def _notify(self, favorite: Favorite, current_rate: float, today: date) -> bool:
        request = NotificationRequest(
            favorite_id=favorite.id,
            origin=favorite.origin,
            destination=favorite.destination,
            threshold=favorite.threshold,
            current_rate=current_rate,
            rate_date=today,
            notify_email=favorite.notify_email,
        )
        try:
            self.notifier.send(request)
        except NotificationError as exc:
            LOGGER.error("Notification for favorite %s failed: %s", favorite.id, exc)
            return False
        return True


__all__ = ["FavoriteService"]
