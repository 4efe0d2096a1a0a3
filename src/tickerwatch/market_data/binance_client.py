"""Binance spot market-data client via ccxt async.

Symbols are kept in exchange-id form (``BTCUSDT``) everywhere else in the
package; this module converts them to ccxt unified symbols (``BTC/USDT``)
and maps ccxt exceptions onto the watcher's error kinds.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import ccxt.async_support as ccxt_async

from tickerwatch.config import ExchangeSettings
from tickerwatch.exceptions import ApiError, DecodeError, NetworkError, NoDataError
from tickerwatch.logging import get_logger
from tickerwatch.market_data.client import MarketDataClient
from tickerwatch.models import PricePoint, Snapshot

logger = get_logger(__name__)

_TICKER_FIELDS = {
    "last_price": "last",
    "percent_change_24h": "percentage",
    "high_24h": "high",
    "low_24h": "low",
    "volume_24h": "baseVolume",
}

# ccxt OHLCV row layout: [timestamp_ms, open, high, low, close, volume]
_OHLCV_TIMESTAMP = 0
_OHLCV_CLOSE = 4


class BinanceClient(MarketDataClient):
    """Public Binance spot client using ccxt async (no API keys)."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings
        exchange_class = getattr(ccxt_async, settings.exchange_id)
        self._exchange = exchange_class(
            {
                "enableRateLimit": True,
                "timeout": settings.timeout_ms,
                "options": {"defaultType": "spot"},
            }
        )

    @property
    def exchange(self) -> Any:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        """Load markets up front.

        A failure here is not fatal: ccxt loads markets lazily on the first
        request, so the first refresh round retries it.
        """
        logger.info("connecting_to_exchange", exchange=self._settings.exchange_id)
        try:
            markets = await self._exchange.load_markets()
        except ccxt_async.BaseError as e:
            logger.warning("load_markets_failed", error=str(e))
            return
        logger.info("exchange_connected", market_count=len(markets))

    async def close(self) -> None:
        """Clean up ccxt async resources. Must be called to avoid leaking sessions."""
        await self._exchange.close()
        logger.info("exchange_connection_closed")

    def unified_symbol(self, symbol: str) -> str:
        """``BTCUSDT`` -> ``BTC/USDT`` for the configured quote asset."""
        quote = self._settings.quote_asset
        if symbol.endswith(quote) and len(symbol) > len(quote):
            return f"{symbol[: -len(quote)]}/{quote}"
        return symbol

    async def fetch_snapshot(self, symbol: str) -> Snapshot:
        ticker = await self._call(symbol, self._exchange.fetch_ticker, self.unified_symbol(symbol))
        values: dict[str, float] = {}
        for name, key in _TICKER_FIELDS.items():
            raw = ticker.get(key) if isinstance(ticker, dict) else None
            try:
                values[name] = float(raw)
            except (TypeError, ValueError):
                raise DecodeError(symbol, f"ticker field {key!r} missing or invalid: {raw!r}") from None
        return Snapshot(**values)

    async def fetch_history(self, symbol: str, limit: int) -> list[PricePoint]:
        rows = await self._call(
            symbol,
            self._exchange.fetch_ohlcv,
            self.unified_symbol(symbol),
            timeframe=self._settings.history_timeframe,
            limit=limit,
        )
        if not isinstance(rows, list):
            raise DecodeError(symbol, f"unexpected OHLCV payload: {type(rows).__name__}")

        points: list[PricePoint] = []
        for row in rows:
            try:
                points.append((int(row[_OHLCV_TIMESTAMP]), float(row[_OHLCV_CLOSE])))
            except (IndexError, TypeError, ValueError):
                logger.debug("skipping_malformed_candle", symbol=symbol, row=row)

        if not points:
            raise NoDataError(symbol, f"no price history returned for {symbol}")
        return points

    async def _call(self, symbol: str, fn: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Run one ccxt request, translating its errors."""
        try:
            return await fn(*args, **kwargs)
        except ccxt_async.NetworkError as e:
            raise NetworkError(symbol, f"network error for {symbol}: {e}") from e
        except ccxt_async.BaseError as e:
            raise ApiError(symbol, f"API error for {symbol}: {e}") from e
