"""SQLAlchemy ORM persistence for favorites in the bundled SQLite file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import DateTime, Float, String, UniqueConstraint, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from fx_forecast.db import DEFAULT_SQLITE_DB_PATH
from fx_forecast.errors import FavoriteExistsError
from fx_forecast.ingestion.models import Favorite
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class _FavoriteRow(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("origin", "destination", "notify_email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    origin: Mapped[str] = mapped_column(String(3), nullable=False)
    destination: Mapped[str] = mapped_column(String(3), nullable=False)
    threshold: Mapped[float] = mapped_column(Float, nullable=False)
    notify_email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_favorite(self) -> Favorite:
        return Favorite(
            id=self.id,
            origin=self.origin,
            destination=self.destination,
            threshold=float(self.threshold),
            notify_email=self.notify_email,
            created_at=as_utc(self.created_at),
        )


@dataclass(slots=True)
class PersistenceResult:
    """Represents how many rows a write inserted."""

    inserted: int = 0


def as_utc(value: datetime | str) -> datetime:
    """Return ``value`` as an aware UTC datetime; SQLite drops tzinfo on write."""

    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SQLiteManager:
    """Favorites store backed by a local SQLite file."""

    def __init__(self, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self._SessionFactory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, expire_on_commit=False, future=True
        )

    def insert_favorite(self, favorite: Favorite) -> PersistenceResult:
        result = PersistenceResult()
        with self._SessionFactory() as session:
            session.add(
                _FavoriteRow(
                    id=favorite.id,
                    origin=favorite.origin,
                    destination=favorite.destination,
                    threshold=favorite.threshold,
                    notify_email=favorite.notify_email,
                    created_at=favorite.created_at,
                )
            )
            try:
                session.commit()
            except IntegrityError as exc:
                raise FavoriteExistsError(
                    f"favorite {favorite.origin}->{favorite.destination} already exists "
                    f"for {favorite.notify_email}"
                ) from exc
            result.inserted += 1
        LOGGER.info("Stored favorite %s", favorite.id)
        return result

    def fetch_all(self) -> list[Favorite]:
        with self._SessionFactory() as session:
            stmt = select(_FavoriteRow).order_by(_FavoriteRow.created_at, _FavoriteRow.id)
            return [row.to_favorite() for row in session.execute(stmt).scalars()]

    def find_pair(self, origin: str, destination: str, notify_email: str) -> Favorite | None:
        with self._SessionFactory() as session:
            stmt = select(_FavoriteRow).where(
                _FavoriteRow.origin == origin,
                _FavoriteRow.destination == destination,
                _FavoriteRow.notify_email == notify_email,
            )
            row = session.execute(stmt).scalars().first()
            return row.to_favorite() if row is not None else None

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "SQLiteManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["PersistenceResult", "SQLiteManager", "as_utc"]
