from __future__ import annotations

import json

import pytest

from deribit_connector import cli
from deribit_connector.config import Settings
from deribit_connector.domain.models import OHLCV, Ticker
from deribit_connector.errors import ExchangeNotAvailable


class _StubConnector:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def fetch_time(self) -> int:
        return 1_550_147_385_946

    def fetch_ticker(self, symbol: str) -> Ticker:
        self.calls.append(("ticker", symbol))
        return Ticker(
            symbol=symbol,
            timestamp=0,
            high=None,
            low=None,
            bid=1.0,
            ask=2.0,
            last=1.5,
            quote_volume=None,
            bid_volume=None,
            ask_volume=None,
            mark_price=None,
            index_price=None,
            raw={"secret": "not printed"},
        )

    def fetch_ohlcv(self, symbol, timeframe, since, limit):
        self.calls.append(("ohlcv", symbol, timeframe, since, limit))
        return [OHLCV(60_000, 1.0, 2.0, 0.5, 1.5, 10.0)]


class _FailingConnector:
    def fetch_time(self) -> int:
        raise ExchangeNotAvailable("down")


def test_parser_defaults() -> None:
    args = cli.build_parser().parse_args(["ticker", "--symbol", "BTC-PERPETUAL"])

    assert args.command == "ticker"
    assert args.timeframe == "1h"
    assert args.testnet is False


@pytest.mark.parametrize(
    "argv",
    [
        ["ticker"],
        ["time", "--limit", "0"],
        ["ohlcv", "--symbol", "BTC-PERPETUAL"],
    ],
)
def test_invalid_arguments_raise(argv: list[str]) -> None:
    args = cli.build_parser().parse_args(argv)

    with pytest.raises(ValueError):
        cli.apply_cli_overrides(Settings(), args)


def test_overrides_applied() -> None:
    args = cli.build_parser().parse_args(["time", "--testnet", "--log-level", "DEBUG"])

    settings = cli.apply_cli_overrides(Settings(), args)

    assert settings.testnet is True
    assert settings.log_level == "DEBUG"


def test_run_command_renders_json_without_raw() -> None:
    connector = _StubConnector()
    args = cli.build_parser().parse_args(["ticker", "--symbol", "BTC-PERPETUAL"])

    output = json.loads(cli.run_command(connector, args))  # type: ignore[arg-type]

    assert output["symbol"] == "BTC-PERPETUAL"
    assert output["last"] == 1.5
    assert "raw" not in output


def test_run_command_renders_ohlcv_frame() -> None:
    connector = _StubConnector()
    args = cli.build_parser().parse_args(
        ["ohlcv", "--symbol", "BTC-PERPETUAL", "--timeframe", "1m", "--limit", "1"]
    )

    output = cli.run_command(connector, args)  # type: ignore[arg-type]

    assert connector.calls == [("ohlcv", "BTC-PERPETUAL", "1m", None, 1)]
    assert "close" in output
    assert "1970-01-01 00:01:00" in output


def test_main_returns_2_on_config_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli.Settings, "from_env", classmethod(lambda cls: Settings()))

    assert cli.main(["ticker"]) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_main_prints_result(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli.Settings, "from_env", classmethod(lambda cls: Settings()))
    monkeypatch.setattr(
        cli.DeribitConnector, "from_settings", classmethod(lambda cls, s: _StubConnector())
    )

    assert cli.main(["time"]) == 0
    assert "1550147385946" in capsys.readouterr().out


def test_main_returns_1_on_connector_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli.Settings, "from_env", classmethod(lambda cls: Settings()))
    monkeypatch.setattr(
        cli.DeribitConnector, "from_settings", classmethod(lambda cls, s: _FailingConnector())
    )

    assert cli.main(["time"]) == 1
