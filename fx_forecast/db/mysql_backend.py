"""MySQL backend strategy."""

from __future__ import annotations

from fx_forecast.db.relational_backend import RelationalBackend

MYSQL_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS favorites (
    id VARCHAR(36) NOT NULL PRIMARY KEY,
    origin CHAR(3) NOT NULL,
    destination CHAR(3) NOT NULL,
    threshold DECIMAL(18, 6) NOT NULL,
    notify_email VARCHAR(320) NOT NULL,
    created_at DATETIME(6) NOT NULL,
    UNIQUE KEY favorites_pair_email_key (origin, destination, notify_email)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""


class MySQLBackend(RelationalBackend):
    """Relational backend using MySQL (InnoDB) column types."""

    schema_sql = MYSQL_SCHEMA_SQL


__all__ = ["MySQLBackend"]
