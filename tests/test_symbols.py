"""Tests for coin list validation."""

import pytest

from tickerwatch.exceptions import NoValidSymbolsError
from tickerwatch.symbols import normalize_symbols, split_coins


class TestSplitCoins:
    def test_splits_on_commas(self) -> None:
        assert split_coins("BTC,ETH, sol") == ["BTC", "ETH", " sol"]

    def test_ignores_empty_entries(self) -> None:
        assert split_coins("BTC,,ETH, ,") == ["BTC", "ETH"]


class TestNormalizeSymbols:
    def test_trims_uppercases_and_appends_quote(self) -> None:
        symbols, skipped = normalize_symbols([" btc", "Eth "])
        assert symbols == ["BTCUSDT", "ETHUSDT"]
        assert skipped == []

    def test_invalid_entries_are_dropped(self) -> None:
        symbols, skipped = normalize_symbols(["BTC", "ET-H", "SOL/", "DOGE"])
        assert symbols == ["BTCUSDT", "DOGEUSDT"]
        assert skipped == ["ET-H", "SOL/"]

    def test_non_ascii_alphanumerics_rejected(self) -> None:
        symbols, skipped = normalize_symbols(["BTC", "ÉTH"])
        assert symbols == ["BTCUSDT"]
        assert skipped == ["ÉTH"]

    def test_duplicates_keep_first_position(self) -> None:
        symbols, _ = normalize_symbols(["eth", "BTC", "ETH"])
        assert symbols == ["ETHUSDT", "BTCUSDT"]

    def test_caps_number_of_coins(self) -> None:
        coins = [f"C{i}" for i in range(30)]
        symbols, _ = normalize_symbols(coins, max_coins=20)
        assert len(symbols) == 20
        assert symbols[-1] == "C19USDT"

    def test_custom_quote(self) -> None:
        symbols, _ = normalize_symbols(["btc"], quote_asset="USDC")
        assert symbols == ["BTCUSDC"]

    def test_nothing_valid_is_fatal(self) -> None:
        with pytest.raises(NoValidSymbolsError):
            normalize_symbols(["$$$", "a b"])

    def test_empty_list_is_fatal(self) -> None:
        with pytest.raises(NoValidSymbolsError):
            normalize_symbols([])

    def test_fatal_error_lists_rejected_entries(self) -> None:
        with pytest.raises(NoValidSymbolsError) as exc_info:
            normalize_symbols(["BT-C", "ET/H"])
        assert exc_info.value.skipped == ["BT-C", "ET/H"]
