"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Public market-data exchange settings (no credentials needed)."""

    model_config = SettingsConfigDict(env_prefix="EXCHANGE_")

    exchange_id: str = "binance"
    timeout_ms: int = 30_000  # per-request timeout enforced by ccxt
    quote_asset: str = "USDT"
    history_timeframe: str = "15m"


class WatchSettings(BaseSettings):
    """What to watch and how to lay it out."""

    model_config = SettingsConfigDict(env_prefix="WATCH_")

    coins: str = "BTC,ETH"  # comma separated base assets
    refresh_interval: int = 60  # seconds between snapshot rounds
    history_capacity: int = 60  # points kept per symbol
    max_coins: int = 20
    layout: Literal["grid", "rows"] = "grid"
    min_row_height: int = 10  # rows layout only
    max_visible_rows: int = 6  # rows layout only


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_file: str = "tickerwatch.log"
    exchange: ExchangeSettings = ExchangeSettings()
    watch: WatchSettings = WatchSettings()
