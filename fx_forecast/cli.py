"""Command line access to conversions, history, forecasts and favorites."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from fx_forecast import FxForecast
from fx_forecast.errors import FxForecastError
from fx_forecast.ingestion.strategy import BasePolicy
from fx_forecast.utils.logger import get_logger, set_level

LOGGER = get_logger(__name__)

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fx-forecast", description=__doc__)
    parser.add_argument("--db-url", dest="db_url", help="Favorites database DSN (defaults to SQLite)")
    parser.add_argument(
        "--substitute-base",
        dest="substitute_base",
        action="store_true",
        help="Quote against the provider's base currency instead of rejecting other origins",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert an amount at the live rate")
    convert.add_argument("origin")
    convert.add_argument("destination")
    convert.add_argument("amount", type=float)

    history = commands.add_parser("history", help="Daily rates for an inclusive date range")
    history.add_argument("origin")
    history.add_argument("destination")
    history.add_argument("--from", dest="start", required=True, help="Start date (YYYY-MM-DD)")
    history.add_argument("--to", dest="end", required=True, help="End date (YYYY-MM-DD)")

    forecast = commands.add_parser("forecast", help="Estimate tomorrow's rate")
    forecast.add_argument("origin")
    forecast.add_argument("destination")

    destinations = commands.add_parser("destinations", help="List quotable destinations")
    destinations.add_argument("origin")

    favorites = commands.add_parser("favorites", help="Manage watched currency pairs")
    favorite_commands = favorites.add_subparsers(dest="favorites_command", required=True)
    favorite_commands.add_parser("list", help="Show saved favorites")
    add = favorite_commands.add_parser("add", help="Save a favorite pair")
    add.add_argument("origin")
    add.add_argument("destination")
    add.add_argument("threshold", type=float)
    add.add_argument("email")
    favorite_commands.add_parser("check", help="Check favorites against live rates")
    return parser


def _run(fx: FxForecast, args: argparse.Namespace) -> Any:
    if args.command == "convert":
        return fx.convert(args.origin, args.destination, args.amount).to_payload()
    if args.command == "history":
        return fx.history(args.origin, args.destination, args.start, args.end).to_payload()
    if args.command == "forecast":
        return fx.forecast(args.origin, args.destination).to_payload()
    if args.command == "destinations":
        return [currency.to_payload() for currency in fx.destinations(args.origin)]
    if args.favorites_command == "add":
        return fx.save_favorite(args.origin, args.destination, args.threshold, args.email).to_payload()
    if args.favorites_command == "check":
        return [result.to_payload() for result in fx.check_favorites()]
    return [favorite.to_payload() for favorite in fx.favorites()]


def main(argv: Sequence[str] | None = None, *, fx: FxForecast | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_level(args.log_level)
    try:
        client = fx or FxForecast(
            db_config=args.db_url,
            base_policy=BasePolicy.SUBSTITUTE if args.substitute_base else BasePolicy.REJECT,
        )
        with client:
            payload = _run(client, args)
    except FxForecastError as exc:
        LOGGER.debug("Command %s failed: %s", args.command, exc)
        print(json.dumps(exc.to_payload()), file=sys.stderr)
        return 1
    print(json.dumps(payload, indent=2, default=str))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
