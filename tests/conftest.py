"""Shared test fixtures for the ticker watcher."""

from unittest.mock import AsyncMock

import pytest

from tickerwatch.config import AppSettings, ExchangeSettings, WatchSettings
from tickerwatch.market_data.client import MarketDataClient
from tickerwatch.models import Snapshot
from tickerwatch.state.app_state import ApplicationState


def _make_snapshot(price: float = 50000.0, change: float = 2.5) -> Snapshot:
    """Create a Snapshot with plausible 24h stats around ``price``."""
    return Snapshot(
        last_price=price,
        percent_change_24h=change,
        high_24h=price * 1.05,
        low_24h=price * 0.95,
        volume_24h=12345.0,
    )


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (no log file, grid layout)."""
    return AppSettings(
        log_level="DEBUG",
        log_file="",
        exchange=ExchangeSettings(exchange_id="binance", timeout_ms=1000),
        watch=WatchSettings(coins="BTC,ETH,SOL", refresh_interval=5),
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """Mock MarketDataClient returning a snapshot and a short history."""
    client = AsyncMock(spec=MarketDataClient)
    client.fetch_snapshot.return_value = _make_snapshot()
    client.fetch_history.return_value = [(1000, 100.0), (2000, 110.0), (3000, 105.0)]
    return client


@pytest.fixture
def app_state() -> ApplicationState:
    """ApplicationState watching two symbols with a small history window."""
    return ApplicationState(["BTCUSDT", "ETHUSDT"], capacity=5)
