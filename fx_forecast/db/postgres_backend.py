"""PostgreSQL backend strategy."""

from __future__ import annotations

from fx_forecast.db.relational_backend import RelationalBackend

POSTGRES_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS favorites (
    id VARCHAR(36) NOT NULL PRIMARY KEY,
    origin CHAR(3) NOT NULL,
    destination CHAR(3) NOT NULL,
    threshold NUMERIC(18, 6) NOT NULL CHECK (threshold > 0),
    notify_email VARCHAR(320) NOT NULL,
    created_at TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT (NOW() AT TIME ZONE 'utc'),
    CONSTRAINT favorites_pair_email_key UNIQUE (origin, destination, notify_email)
);
"""


class PostgresBackend(RelationalBackend):
    """Relational backend using PostgreSQL column types and constraints."""

    schema_sql = POSTGRES_SCHEMA_SQL


__all__ = ["PostgresBackend"]
