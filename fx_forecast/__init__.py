"""Public interface for the fx_forecast package."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date
from enum import Enum
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Callable
from urllib.parse import quote, urlparse, urlunparse

from sqlalchemy import create_engine, text

from fx_forecast.config import ProviderSettings
from fx_forecast.db import DEFAULT_SQLITE_DB_PATH
from fx_forecast.db.base_backend import FavoriteBackend
from fx_forecast.db.mysql_backend import MySQLBackend
from fx_forecast.db.postgres_backend import PostgresBackend
from fx_forecast.db.sqlite_backend import SQLiteBackend
from fx_forecast.errors import ConfigurationError, ErrorKind, FxForecastError
from fx_forecast.forecast.estimator import ForecastEstimator
from fx_forecast.forecast.pipeline import ForecastPipeline
from fx_forecast.ingestion.exchangerate_api import ExchangeRateAPIClient
from fx_forecast.ingestion.exchangerates_api import ExchangeRatesAPIClient
from fx_forecast.ingestion.models import (
    ConversionResult,
    Favorite,
    FavoriteCheckResult,
    ForecastResult,
    NotificationReceipt,
    NotificationRequest,
    RateSeries,
)
from fx_forecast.ingestion.series_builder import HistoricalSeriesBuilder
from fx_forecast.ingestion.strategy import BasePolicy, LiveRateSource, RateSource
from fx_forecast.notifications.mailer import EmailNotifier
from fx_forecast.services.favorites import FavoriteService
from fx_forecast.utils.currency import Currency, get_currency, normalise_code, supported_destinations
from fx_forecast.utils.date_range import DateRange

__all__ = [
    "__version__",
    "BasePolicy",
    "DatabaseBackend",
    "DatabaseConnectionInfo",
    "DateRange",
    "ErrorKind",
    "FxForecast",
    "FxForecastError",
    "ProviderSettings",
]

try:
    __version__ = importlib_metadata.version("fx-forecast")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


class DatabaseBackend(str, Enum):
    """Supported database engines for favorites."""

    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"

    @classmethod
    def resolve_backend_and_scheme(cls, scheme: str) -> tuple["DatabaseBackend", str]:
        """Return backend enum + canonical scheme used in connection URLs."""

        if not scheme:
            raise ConfigurationError("DB_URL must include a scheme (e.g. mysql:// or postgres://)")
        scheme_lower = scheme.lower()
        base_scheme, _, driver = scheme_lower.partition("+")
        if base_scheme in {"postgresql", "postgres"}:
            # SQLAlchemy only understands the ``postgresql`` spelling.
            canonical_scheme = f"postgresql+{driver}" if driver else "postgresql"
            return cls.POSTGRES, canonical_scheme
        if base_scheme == "sqlite":
            return cls.SQLITE, "sqlite"
        if base_scheme == "mysql":
            canonical_scheme = scheme_lower if driver else "mysql"
            return cls.MYSQL, canonical_scheme
        raise ConfigurationError(
            "Unsupported database backend. Supported values are SQLite, MySQL and Postgres."
        )

    @classmethod
    def from_scheme(cls, scheme: str) -> "DatabaseBackend":
        """Normalise URL schemes into a DatabaseBackend value."""

        backend, _ = cls.resolve_backend_and_scheme(scheme)
        return backend


@dataclass(slots=True)
class DatabaseConnectionInfo:
    """Represents where favorites are persisted."""

    backend: DatabaseBackend
    url: str
    name: str | None
    username: str | None
    password: str | None
    host: str | None
    port: int | None

    @classmethod
    def from_url(cls, url: str) -> "DatabaseConnectionInfo":
        """Create a connection object by parsing a database URL/DSN."""

        parsed = urlparse(url)
        if not parsed.scheme:
            raise ConfigurationError("DB_URL must include a scheme (e.g. mysql:// or postgres://)")
        backend, canonical_scheme = DatabaseBackend.resolve_backend_and_scheme(parsed.scheme)
        if parsed.scheme != canonical_scheme:
            parsed = parsed._replace(scheme=canonical_scheme)
            url = urlunparse(parsed)
        if backend is DatabaseBackend.SQLITE:
            # sqlite:///relative.db and sqlite:////abs/path.db both keep the path after "/".
            name = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        else:
            name = parsed.path[1:] if parsed.path and parsed.path != "/" else None
        try:
            port = parsed.port
        except ValueError as exc:
            raise ConfigurationError(f"DB_URL has an invalid port: {exc}") from exc

        return cls(
            backend=backend,
            url=url,
            name=name or None,
            username=parsed.username,
            password=parsed.password,
            host=parsed.hostname,
            port=port,
        )

    @classmethod
    def default_sqlite(cls, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> "DatabaseConnectionInfo":
        path = Path(db_path)
        return cls(
            backend=DatabaseBackend.SQLITE,
            url=f"sqlite:///{quote(path.as_posix(), safe='/:')}",
            name=str(path),
            username=None,
            password=None,
            host=None,
            port=None,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.backend is DatabaseBackend.SQLITE


class FxForecast:
    """Package facade wiring rate sources, forecasting and favorites together."""

    __slots__ = (
        "settings",
        "connection_info",
        "base_policy",
        "_clock",
        "_history_source",
        "_live_source",
        "_notifier",
        "_favorites_backend",
    )

    __version__ = __version__

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        db_config: DatabaseConnectionInfo | str | None = None,
        history_source: RateSource | None = None,
        live_source: LiveRateSource | None = None,
        notifier: EmailNotifier | None = None,
        base_policy: BasePolicy = BasePolicy.REJECT,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """Configure providers and persistence.

        ``settings`` defaults to :meth:`ProviderSettings.from_env`. Sources and the
        notifier are built lazily from it unless supplied explicitly, so a key is
        only required once the feature using it is called. ``db_config`` accepts a
        ``DatabaseConnectionInfo`` or a DSN; without one favorites live in the
        bundled SQLite file.
        """

        self.settings = settings if settings is not None else ProviderSettings.from_env()
        self.connection_info = self._build_connection_info(db_config or self.settings.db_url)
        self.base_policy = base_policy
        self._clock = clock
        self._history_source = history_source
        self._live_source = live_source
        self._notifier = notifier
        self._favorites_backend: FavoriteBackend | None = None

    @staticmethod
    def _build_connection_info(
        db_config: DatabaseConnectionInfo | str | None,
    ) -> DatabaseConnectionInfo:
        if isinstance(db_config, DatabaseConnectionInfo):
            return db_config
        if isinstance(db_config, str):
            return DatabaseConnectionInfo.from_url(db_config)
        return DatabaseConnectionInfo.default_sqlite()

    # -- collaborators -----------------------------------------------------------------

    def _get_history_source(self) -> RateSource:
        if self._history_source is None:
            self._history_source = ExchangeRatesAPIClient(
                self.settings.require_exchange_rates_key(),
                base_url=self.settings.exchange_rates_url,
                timeout=self.settings.timeout,
            )
        return self._history_source

    def _get_live_source(self) -> LiveRateSource:
        if self._live_source is None:
            self._live_source = ExchangeRateAPIClient(
                self.settings.require_exchange_rate_key(),
                base_url=self.settings.exchange_rate_url,
                timeout=self.settings.timeout,
            )
        return self._live_source

    def _get_notifier(self) -> EmailNotifier:
        if self._notifier is None:
            self._notifier = EmailNotifier(self.settings.smtp, timeout=self.settings.timeout)
        return self._notifier

    def _get_favorites_backend(self) -> FavoriteBackend:
        if self._favorites_backend is None:
            backend = self.connection_info.backend
            if backend is DatabaseBackend.SQLITE:
                strategy: FavoriteBackend = SQLiteBackend(
                    db_path=self.connection_info.name or DEFAULT_SQLITE_DB_PATH
                )
            elif backend is DatabaseBackend.POSTGRES:
                strategy = PostgresBackend(self.connection_info.url)
            elif backend is DatabaseBackend.MYSQL:
                strategy = MySQLBackend(self.connection_info.url)
            else:  # pragma: no cover - enum is exhaustive
                raise ValueError(f"Unsupported backend: {backend}")
            strategy.ensure_schema()
            self._favorites_backend = strategy
        return self._favorites_backend

    def _series_builder(self) -> HistoricalSeriesBuilder:
        return HistoricalSeriesBuilder(
            self._get_history_source(),
            delay_seconds=self.settings.request_delay,
            base_policy=self.base_policy,
            clock=self._clock,
        )

    def _favorite_service(self) -> FavoriteService:
        return FavoriteService(
            self._get_favorites_backend(),
            self._get_live_source(),
            self._get_notifier(),
            clock=self._clock,
        )

    # -- rates -------------------------------------------------------------------------

    def history(
        self,
        origin: str,
        destination: str,
        start_date: str | date,
        end_date: str | date,
        *,
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
    ) -> RateSeries:
        """Return one rate per day between ``start_date`` and ``end_date`` inclusive."""

        date_range = DateRange.from_values(start_date, end_date)
        return self._series_builder().build_series(
            origin, destination, date_range, cancel_event=cancel_event, deadline=deadline
        )

    def forecast(
        self,
        origin: str,
        destination: str,
        *,
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
    ) -> ForecastResult:
        """Estimate tomorrow's rate from the five days ending yesterday."""

        pipeline = ForecastPipeline(
            self._series_builder(), ForecastEstimator(clock=self._clock), clock=self._clock
        )
        return pipeline.forecast(
            origin, destination, cancel_event=cancel_event, deadline=deadline
        )

    def convert(self, origin: str, destination: str, amount: float) -> ConversionResult:
        """Convert ``amount`` at the current live rate."""

        origin_code = get_currency(origin).code
        destination_code = get_currency(destination).code
        source = self._get_live_source()
        converter = getattr(source, "convert", None)
        if not callable(converter):
            raise TypeError(f"{type(source).__name__} does not support conversions")
        return converter(origin_code, destination_code, amount)

    # -- currency metadata -------------------------------------------------------------

    @staticmethod
    def currency(code: str) -> Currency:
        return get_currency(code)

    def destinations(self, origin: str) -> list[Currency]:
        fixed_base = getattr(self._history_source, "fixed_base", None) or ExchangeRatesAPIClient.fixed_base
        return supported_destinations(normalise_code(origin), base=fixed_base)

    # -- favorites ---------------------------------------------------------------------

    def save_favorite(
        self, origin: str, destination: str, threshold: float, notify_email: str
    ) -> Favorite:
        service = FavoriteService(
            self._get_favorites_backend(), self._live_source, self._notifier, clock=self._clock
        )
        return service.save(origin, destination, threshold, notify_email)

    def favorites(self) -> list[Favorite]:
        return self._get_favorites_backend().fetch_all()

    def check_favorites(self) -> list[FavoriteCheckResult]:
        return self._favorite_service().check()

    def notify(self, request: NotificationRequest) -> NotificationReceipt:
        return self._get_notifier().send(request)

    def connection(self) -> tuple[bool, str | None]:
        """Attempt to reach the favorites database and report the outcome."""

        engine = None
        try:
            engine = create_engine(self.connection_info.url, future=True)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except ModuleNotFoundError as exc:
            return False, f"Missing optional dependency '{exc.name or exc}' for {self.connection_info.backend.value}"
        except Exception as exc:  # pragma: no cover - SQLAlchemy provides error detail
            return False, str(exc)
        finally:
            if engine is not None:
                engine.dispose()
        return True, None

    def close(self) -> None:
        if self._favorites_backend is not None:
            self._favorites_backend.close()
            self._favorites_backend = None
        for source in (self._history_source, self._live_source):
            closer = getattr(source, "close", None)
            if callable(closer):
                closer()

    def __enter__(self) -> "FxForecast":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
