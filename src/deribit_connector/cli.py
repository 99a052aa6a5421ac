"""Command-line interface for quick venue lookups."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, is_dataclass
from typing import Any

from deribit_connector.config import Settings
from deribit_connector.connectors.deribit import TIMEFRAMES, DeribitConnector
from deribit_connector.errors import ConnectorError
from deribit_connector.logging.logger import setup_logger
from deribit_connector.parsing.frames import ohlcv_to_frame

COMMANDS = (
    "time",
    "currencies",
    "markets",
    "ticker",
    "order-book",
    "ohlcv",
    "balance",
    "open-orders",
)
SYMBOL_COMMANDS = {"ticker", "order-book", "ohlcv", "open-orders"}


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Deribit connector lookups")
    parser.add_argument("command", choices=COMMANDS, help="Operation to run")
    parser.add_argument("--symbol", type=str, help="Instrument, e.g. BTC-PERPETUAL")
    parser.add_argument("--timeframe", choices=list(TIMEFRAMES), default="1h", help="Candle size")
    parser.add_argument("--limit", type=int, help="Maximum number of rows")
    parser.add_argument("--since", type=int, help="Start time in epoch milliseconds")
    parser.add_argument("--testnet", action="store_true", help="Use test.deribit.com")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    if args.command in SYMBOL_COMMANDS and not args.symbol:
        raise ValueError(f"{args.command} requires --symbol")
    if args.limit is not None and args.limit <= 0:
        raise ValueError("--limit must be positive")
    if args.command == "ohlcv" and args.limit is None and args.since is None:
        raise ValueError("ohlcv requires --limit or --since")

    overrides: dict[str, object] = {}
    if args.testnet:
        overrides["testnet"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    return settings.with_overrides(**overrides)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        record = asdict(value)
        record.pop("raw", None)
        return record
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def run_command(connector: DeribitConnector, args: argparse.Namespace) -> str:
    """Execute one command and render its output."""
    command = args.command
    if command == "ohlcv":
        bars = connector.fetch_ohlcv(args.symbol, args.timeframe, args.since, args.limit)
        return ohlcv_to_frame(bars).to_string()
    if command == "time":
        payload: Any = connector.fetch_time()
    elif command == "currencies":
        payload = connector.fetch_currencies()
    elif command == "markets":
        payload = list(connector.load_markets().values())
    elif command == "ticker":
        payload = connector.fetch_ticker(args.symbol)
    elif command == "order-book":
        payload = connector.fetch_order_book(args.symbol, args.limit)
    elif command == "balance":
        payload = connector.fetch_balance()
    else:
        payload = connector.fetch_open_orders(args.symbol, args.since, args.limit)
    return json.dumps(_to_jsonable(payload), indent=2, default=str)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    logger = setup_logger(settings.log_level)
    connector = DeribitConnector.from_settings(settings)
    try:
        print(run_command(connector, args))
    except ConnectorError as exc:
        logger.error("error | %s: %s", type(exc).__name__, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
