"""Market-data layer -- public ticker and candle access via ccxt."""

from tickerwatch.market_data.binance_client import BinanceClient
from tickerwatch.market_data.client import MarketDataClient

__all__ = ["BinanceClient", "MarketDataClient"]
