"""Runtime configuration for provider credentials, HTTP and SMTP settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from fx_forecast.errors import ConfigurationError

DEFAULT_EXCHANGE_RATES_URL = "https://api.exchangeratesapi.io/v1"
DEFAULT_EXCHANGE_RATE_URL = "https://v6.exchangerate-api.com/v6"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_REQUEST_DELAY_SECONDS = 1.0
DEFAULT_SENDER = "alerts@fx-forecast.local"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class SMTPSettings:
    """How alert emails are delivered; ``host=None`` means log-only delivery."""

    host: str | None = None
    port: int = 587
    username: str | None = None
    password: str | None = None
    sender: str = DEFAULT_SENDER
    starttls: bool = True

    @property
    def enabled(self) -> bool:
        return bool(self.host)


@dataclass(slots=True)
class ProviderSettings:
    """Credentials and tuning knobs passed explicitly into each client."""

    exchange_rate_api_key: str | None = None
    exchange_rates_api_key: str | None = None
    exchange_rate_url: str = DEFAULT_EXCHANGE_RATE_URL
    exchange_rates_url: str = DEFAULT_EXCHANGE_RATES_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    request_delay: float = DEFAULT_REQUEST_DELAY_SECONDS
    db_url: str | None = None
    smtp: SMTPSettings | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProviderSettings":
        """Build settings from environment variables.

        Missing keys are tolerated here; the ``require_*`` accessors raise when a
        feature that needs them is actually used.
        """

        env = os.environ if environ is None else environ
        smtp = SMTPSettings(
            host=env.get("SMTP_HOST") or None,
            port=_parse_int(env, "SMTP_PORT", 587),
            username=env.get("SMTP_USERNAME") or None,
            password=env.get("SMTP_PASSWORD") or None,
            sender=env.get("SMTP_SENDER") or DEFAULT_SENDER,
            starttls=env.get("SMTP_STARTTLS", "true").strip().lower() in _TRUTHY,
        )
        return cls(
            exchange_rate_api_key=env.get("EXCHANGE_RATE_API_KEY") or None,
            exchange_rates_api_key=env.get("EXCHANGE_RATES_API_KEY") or None,
            exchange_rate_url=env.get("EXCHANGE_RATE_API_URL") or DEFAULT_EXCHANGE_RATE_URL,
            exchange_rates_url=env.get("EXCHANGE_RATES_API_URL") or DEFAULT_EXCHANGE_RATES_URL,
            timeout=_parse_float(env, "FX_FORECAST_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            request_delay=_parse_float(
                env, "FX_FORECAST_REQUEST_DELAY", DEFAULT_REQUEST_DELAY_SECONDS
            ),
            db_url=env.get("FX_FORECAST_DB_URL") or None,
            smtp=smtp,
        )

    def require_exchange_rate_key(self) -> str:
        if not self.exchange_rate_api_key:
            raise ConfigurationError("EXCHANGE_RATE_API_KEY is not set")
        return self.exchange_rate_api_key

    def require_exchange_rates_key(self) -> str:
        if not self.exchange_rates_api_key:
            raise ConfigurationError("EXCHANGE_RATES_API_KEY is not set")
        return self.exchange_rates_api_key


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative")
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


__all__ = ["ProviderSettings", "SMTPSettings"]
