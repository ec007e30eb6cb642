"""Backend strategy interfaces for favorites storage."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fx_forecast.db.sqlite_manager import PersistenceResult
from fx_forecast.ingestion.models import Favorite


class FavoriteBackend(ABC):
    """Common interface implemented by every favorites backend."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create required tables and verify connectivity."""

    @abstractmethod
    def insert_favorite(self, favorite: Favorite) -> PersistenceResult:
        """Persist a new favorite."""

    @abstractmethod
    def fetch_all(self) -> list[Favorite]:
        """Return every stored favorite ordered by creation time."""

    @abstractmethod
    def find_pair(self, origin: str, destination: str, notify_email: str) -> Favorite | None:
        """Return the favorite watching this pair for ``notify_email``, if any."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""


__all__ = ["FavoriteBackend"]
