"""Validation of the user-supplied coin list."""

from collections.abc import Iterable

from tickerwatch.exceptions import NoValidSymbolsError
from tickerwatch.logging import get_logger

logger = get_logger(__name__)


def split_coins(raw: str) -> list[str]:
    """Split a comma-separated coin list, ignoring empty entries."""
    return [part for part in raw.split(",") if part.strip()]


def normalize_symbols(
    coins: Iterable[str],
    quote_asset: str = "USDT",
    max_coins: int = 20,
) -> tuple[list[str], list[str]]:
    """Turn coin names into exchange symbols: ``" btc"`` -> ``"BTCUSDT"``.

    At most ``max_coins`` entries are considered. Entries that are not purely
    alphanumeric are dropped; duplicates keep their first position.

    Returns:
        Tuple of (symbols, skipped) where ``skipped`` holds the rejected
        entries as given.

    Raises:
        NoValidSymbolsError: Nothing valid remains; carries ``skipped``.
    """
    symbols: list[str] = []
    skipped: list[str] = []
    for coin in list(coins)[:max_coins]:
        name = coin.strip().upper()
        if not name or not name.isascii() or not name.isalnum():
            logger.warning("invalid_coin_symbol_skipped", coin=coin)
            skipped.append(coin)
            continue
        symbol = f"{name}{quote_asset}"
        if symbol not in symbols:
            symbols.append(symbol)

    if not symbols:
        raise NoValidSymbolsError("No valid coin symbols provided", skipped=skipped)
    return symbols, skipped
