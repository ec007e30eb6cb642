"""Helpers for working with the bundled SQLite favorites database."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["DEFAULT_SQLITE_DB_PATH", "bundled_sqlite_path"]

# Resolved next to this package so the location does not depend on the
# working directory; SQLite needs an absolute path once installed.
DEFAULT_SQLITE_DB_PATH: Final[Path] = Path(__file__).resolve().with_name("favorites.db")


def bundled_sqlite_path() -> Path:
    """Return the absolute path to the packaged ``favorites.db`` file."""

    return DEFAULT_SQLITE_DB_PATH
