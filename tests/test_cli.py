from __future__ import annotations

import json
from datetime import date

import pytest

from fx_forecast import FxForecast, ProviderSettings
from fx_forecast.cli import build_parser, main
from fx_forecast.ingestion.models import ConversionResult

TODAY = date(2024, 3, 15)


class DummyHistorySource:
    source_label = "dummy-history"
    fixed_base = "EUR"

    def fetch_daily_rate(self, base: str, quote: str, rate_date: date) -> float:
        return 4000.0 + rate_date.day


class DummyLiveSource:
    source_label = "dummy-live"

    def fetch_rate(self, origin: str, destination: str) -> float:
        return 4100.0

    def convert(self, origin: str, destination: str, amount: float) -> ConversionResult:
        return ConversionResult(origin, destination, amount, 4100.0, amount * 4100.0, self.source_label)


@pytest.fixture()
def fx(tmp_path) -> FxForecast:
    return FxForecast(
        ProviderSettings(request_delay=0),
        db_config=f"sqlite:///{tmp_path / 'cli.db'}",
        history_source=DummyHistorySource(),
        live_source=DummyLiveSource(),
        clock=lambda: TODAY,
    )


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_history_command_prints_json(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["history", "EUR", "COP", "--from", "2024-03-01", "--to", "2024-03-02"], fx=fx)

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["rates"] == [
        {"date": "2024-03-01", "rate": 4001.0},
        {"date": "2024-03-02", "rate": 4002.0},
    ]
    assert payload["rates_source"] == "dummy-history"


def test_forecast_command(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["forecast", "EUR", "COP"], fx=fx) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["predicted_date"] == "2024-03-16"


def test_convert_command(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["convert", "USD", "COP", "2"], fx=fx) == 0

    assert json.loads(capsys.readouterr().out)["converted_amount"] == 8200.0


def test_destinations_command(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["destinations", "EUR"], fx=fx) == 0

    codes = [item["code"] for item in json.loads(capsys.readouterr().out)]
    assert "COP" in codes and "EUR" not in codes


def test_favorites_commands(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["favorites", "add", "USD", "COP", "4000", "ana@example.com"], fx=fx) == 0
    capsys.readouterr()

    assert main(["favorites", "list"], fx=fx) == 0
    (favorite,) = json.loads(capsys.readouterr().out)
    assert favorite["destination"] == "COP"


def test_errors_are_reported_on_stderr(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["history", "EUR", "COP", "--from", "2024-03-01", "--to", "2024-03-10"], fx=fx)

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    error = json.loads(captured.err)
    assert error["code"] == "RANGE_TOO_WIDE"
    assert error["status"] == 400


def test_favorites_check_command(fx: FxForecast, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["favorites", "add", "USD", "COP", "4000", "ana@example.com"], fx=fx) == 0
    assert main(["favorites", "add", "EUR", "COP", "4500", "ana@example.com"], fx=fx) == 0
    capsys.readouterr()

    assert main(["favorites", "check"], fx=fx) == 0

    results = {item["origin"]: item for item in json.loads(capsys.readouterr().out)}
    assert results["USD"]["exceeded"] is True
    assert results["USD"]["notified"] is True
    assert results["USD"]["current_rate"] == 4100.0
    assert results["USD"]["date"] == "2024-03-15"
    assert results["EUR"]["exceeded"] is False
    assert results["EUR"]["notified"] is False


def test_unsupported_db_url_is_reported_on_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--db-url", "oracle://x/y", "favorites", "list"])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    error = json.loads(captured.err)
    assert error["code"] == "CONFIGURATION"
    assert error["status"] == 500


def test_log_level_is_case_insensitive() -> None:
    args = build_parser().parse_args(["--log-level", "debug", "favorites", "list"])

    assert args.log_level == "DEBUG"


def test_unknown_log_level_is_rejected(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--log-level", "loud", "favorites", "list"])

    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
