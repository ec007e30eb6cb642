"""SQLite backend strategy implementation."""

from __future__ import annotations

from pathlib import Path

from fx_forecast.db import DEFAULT_SQLITE_DB_PATH
from fx_forecast.db.base_backend import FavoriteBackend
from fx_forecast.db.sqlite_manager import PersistenceResult, SQLiteManager
from fx_forecast.ingestion.models import Favorite


class SQLiteBackend(FavoriteBackend):
    """Backend strategy that stores favorites in the bundled SQLite database."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_SQLITE_DB_PATH,
        *,
        manager: SQLiteManager | None = None,
    ) -> None:
        self.manager = manager or SQLiteManager(db_path)
        self.db_path = Path(self.manager.db_path)

    def ensure_schema(self) -> None:
        # ``SQLiteManager`` creates the table in its constructor.
        return None

    def insert_favorite(self, favorite: Favorite) -> PersistenceResult:
        return self.manager.insert_favorite(favorite)

    def fetch_all(self) -> list[Favorite]:
        return self.manager.fetch_all()

    def find_pair(self, origin: str, destination: str, notify_email: str) -> Favorite | None:
        return self.manager.find_pair(origin, destination, notify_email)

    def close(self) -> None:  # pragma: no cover - trivial delegator
        self.manager.close()


__all__ = ["SQLiteBackend"]
