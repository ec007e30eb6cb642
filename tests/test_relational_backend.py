"""Relational backend integration tests using SQLite."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from fx_forecast.db.mysql_backend import MySQLBackend
from fx_forecast.db.postgres_backend import PostgresBackend
from fx_forecast.db.relational_backend import RelationalBackend, _to_naive_utc
from fx_forecast.errors import FavoriteExistsError
from fx_forecast.ingestion.models import Favorite


def _favorite(favorite_id: str, email: str = "ana@example.com") -> Favorite:
    return Favorite(
        id=favorite_id,
        origin="EUR",
        destination="USD",
        threshold=1.1,
        notify_email=email,
        created_at=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
    )


def test_relational_backend_roundtrip(tmp_path: Path) -> None:
    backend = RelationalBackend(f"sqlite:///{tmp_path / 'relational.db'}")
    backend.ensure_schema()

    result = backend.insert_favorite(_favorite("fav-1"))
    backend.insert_favorite(_favorite("fav-2", email="luis@example.com"))

    assert result.inserted == 1
    rows = backend.fetch_all()
    assert [row.id for row in rows] == ["fav-1", "fav-2"]
    assert rows[0].threshold == pytest.approx(1.1)
    assert rows[0].created_at == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

    found = backend.find_pair("EUR", "USD", "luis@example.com")
    assert found is not None and found.id == "fav-2"
    assert backend.find_pair("EUR", "COP", "luis@example.com") is None

    backend.close()


def test_relational_backend_enforces_unique_pair(tmp_path: Path) -> None:
    backend = RelationalBackend(f"sqlite:///{tmp_path / 'unique.db'}")
    backend.ensure_schema()
    backend.insert_favorite(_favorite("fav-1"))

    with pytest.raises(FavoriteExistsError) as excinfo:
        backend.insert_favorite(_favorite("fav-2"))

    assert excinfo.value.to_payload()["code"] == "FAVORITE_EXISTS"
    assert [row.id for row in backend.fetch_all()] == ["fav-1"]

    backend.close()


def test_to_naive_utc_converts_offsets() -> None:
    value = datetime(2024, 3, 1, 11, 30).astimezone(timezone.utc)

    assert _to_naive_utc(value).tzinfo is None
    assert _to_naive_utc(datetime(2024, 3, 1, 9, 0)) == datetime(2024, 3, 1, 9, 0)


def test_dialect_backends_ship_their_own_schema() -> None:
    assert "CHECK" in PostgresBackend("postgresql://localhost/fx").schema_sql
    assert "InnoDB" in MySQLBackend("mysql+pymysql://localhost/fx").schema_sql
    assert PostgresBackend.schema_sql != RelationalBackend.schema_sql
