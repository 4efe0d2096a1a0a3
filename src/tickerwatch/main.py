"""Entry point for the terminal price watcher.

Wiring order:
1. AppSettings (environment / .env), overridden by command-line flags
2. Logging setup (to the log file; the terminal belongs to the UI)
3. Symbol validation (fatal when nothing valid remains)
4. BinanceClient (public ccxt client)
5. ApplicationState, RefreshCoordinator, GridLayout
6. TerminalSession + Renderer + EventSource, then the Watcher loop
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.markup import escape

from tickerwatch.app import Watcher
from tickerwatch.config import AppSettings
from tickerwatch.exceptions import NoValidSymbolsError
from tickerwatch.layout import GridLayout
from tickerwatch.logging import get_logger, setup_logging
from tickerwatch.market_data.binance_client import BinanceClient
from tickerwatch.refresh import RefreshCoordinator
from tickerwatch.state.app_state import ApplicationState
from tickerwatch.symbols import normalize_symbols, split_coins
from tickerwatch.tui.events import EventSource, TerminalSession
from tickerwatch.tui.renderer import Renderer


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickerwatch",
        description="Real-time cryptocurrency price watcher with terminal charts",
    )
    parser.add_argument(
        "-c",
        "--coins",
        help="Comma separated coins to watch, e.g. BTC,ETH,SOL (default from WATCH_COINS)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=_positive_int,
        help="Seconds between refreshes (default from WATCH_REFRESH_INTERVAL)",
    )
    parser.add_argument(
        "--layout",
        choices=["grid", "rows"],
        help="Pane layout: 2x2 grid with paging, or stacked rows with scrolling",
    )
    return parser


def load_settings(argv: list[str] | None = None) -> AppSettings:
    """Read settings from the environment and apply command-line overrides."""
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    overrides = {
        "coins": args.coins,
        "refresh_interval": args.interval,
        "layout": args.layout,
    }
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings.watch = settings.watch.model_copy(update=updates)
    return settings


async def run(settings: AppSettings, symbols: list[str]) -> None:
    """Run the watcher until the user quits."""
    logger = get_logger("tickerwatch.main")
    watch = settings.watch

    client = BinanceClient(settings.exchange)
    state = ApplicationState(
        symbols,
        capacity=watch.history_capacity,
        strategy=watch.layout,
        quote_asset=settings.exchange.quote_asset,
    )
    coordinator = RefreshCoordinator(client)
    layout = GridLayout(
        watch.layout,
        min_row_height=watch.min_row_height,
        max_visible=watch.max_visible_rows,
    )

    logger.info(
        "tickerwatch_starting",
        symbols=symbols,
        interval=watch.refresh_interval,
        layout=watch.layout,
    )

    try:
        await client.connect()
        with TerminalSession() as terminal, Renderer(Console()) as renderer:
            events = EventSource(float(watch.refresh_interval), stdin_fd=terminal.fd)
            events.start()
            try:
                await Watcher(state, coordinator, layout, events, renderer).run()
            finally:
                await events.stop()
    finally:
        await client.close()
        logger.info("tickerwatch_stopped")


def _warn_skipped(err: Console, skipped: list[str]) -> None:
    for coin in skipped:
        err.print(f"[yellow]Warning:[/] Skipping invalid coin symbol: {escape(repr(coin))}")


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point."""
    settings = load_settings(argv)
    setup_logging(settings.log_level, settings.log_file)

    err = Console(stderr=True)
    try:
        symbols, skipped = normalize_symbols(
            split_coins(settings.watch.coins),
            quote_asset=settings.exchange.quote_asset,
            max_coins=settings.watch.max_coins,
        )
    except NoValidSymbolsError as e:
        _warn_skipped(err, e.skipped)
        err.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)
    _warn_skipped(err, skipped)

    asyncio.run(run(settings, symbols))


if __name__ == "__main__":
    main()
