"""Shared logic for SQL (Postgres/MySQL) favorites backends."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from sqlalchemy import DateTime, bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from fx_forecast.db.base_backend import FavoriteBackend
from fx_forecast.db.sqlite_manager import PersistenceResult, as_utc
from fx_forecast.errors import FavoriteExistsError
from fx_forecast.ingestion.models import Favorite
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS favorites (
    id VARCHAR(36) NOT NULL PRIMARY KEY,
    origin VARCHAR(3) NOT NULL,
    destination VARCHAR(3) NOT NULL,
    threshold NUMERIC(18, 6) NOT NULL,
    notify_email VARCHAR(320) NOT NULL,
    created_at TIMESTAMP NOT NULL,
    UNIQUE(origin, destination, notify_email)
);
"""

INSERT_SQL = """
INSERT INTO favorites(id, origin, destination, threshold, notify_email, created_at)
VALUES(:id, :origin, :destination, :threshold, :notify_email, :created_at)
"""

SELECT_COLUMNS = "id, origin, destination, threshold, notify_email, created_at"

# created_at is bound as DateTime so every dialect serialises it the same way.
_INSERT_STATEMENT = text(INSERT_SQL).bindparams(bindparam("created_at", type_=DateTime()))


class RelationalBackend(FavoriteBackend):
    """Base class that encapsulates SQLAlchemy Core interactions."""

    schema_sql: str = SCHEMA_SQL

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True)
        return self._engine_instance

    def ensure_schema(self) -> None:
        with self._get_engine().begin() as connection:
            LOGGER.info("Ensuring favorites schema exists")
            connection.execute(text("SELECT 1"))
            connection.execute(text(self.schema_sql))

    def insert_favorite(self, favorite: Favorite) -> PersistenceResult:
        result = PersistenceResult()
        params = {
            "id": favorite.id,
            "origin": favorite.origin,
            "destination": favorite.destination,
            "threshold": favorite.threshold,
            "notify_email": favorite.notify_email,
            "created_at": _to_naive_utc(favorite.created_at),
        }
        try:
            with self._get_engine().begin() as connection:
                connection.execute(_INSERT_STATEMENT, params)
        except IntegrityError as exc:
            raise FavoriteExistsError(
                f"favorite {favorite.origin}->{favorite.destination} already exists "
                f"for {favorite.notify_email}"
            ) from exc
        result.inserted += 1
        return result

    def fetch_all(self) -> list[Favorite]:
        query = f"SELECT {SELECT_COLUMNS} FROM favorites ORDER BY created_at, id"
        with self._get_engine().connect() as connection:
            return [_row_to_favorite(row._mapping) for row in connection.execute(text(query))]

    def find_pair(self, origin: str, destination: str, notify_email: str) -> Favorite | None:
        query = (
            f"SELECT {SELECT_COLUMNS} FROM favorites "
            "WHERE origin = :origin AND destination = :destination AND notify_email = :notify_email"
        )
        params = {"origin": origin, "destination": destination, "notify_email": notify_email}
        with self._get_engine().connect() as connection:
            row = connection.execute(text(query), params).first()
        return _row_to_favorite(row._mapping) if row is not None else None

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()


def _to_naive_utc(value: datetime) -> datetime:
    return as_utc(value).replace(tzinfo=None)


def _row_to_favorite(mapping: Mapping[str, Any]) -> Favorite:
    return Favorite(
        id=str(mapping["id"]),
        origin=mapping["origin"],
        destination=mapping["destination"],
        threshold=float(mapping["threshold"]),
        notify_email=mapping["notify_email"],
        created_at=as_utc(mapping["created_at"]),
    )


__all__ = ["RelationalBackend"]
