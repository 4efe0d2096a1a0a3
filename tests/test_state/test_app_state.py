"""Tests for ApplicationState: navigation, status derivation and error detail."""

from tickerwatch.exceptions import ApiError, NetworkError, NoDataError
from tickerwatch.models import RefreshOutcome, RoundKind, RoundReport, Snapshot
from tickerwatch.state.app_state import ApplicationState

_SNAPSHOT = Snapshot(100.0, 1.0, 110.0, 90.0, 5000.0)


def _report(kind: RoundKind, **errors: Exception) -> RoundReport:
    outcomes = {
        "BTCUSDT": RefreshOutcome("BTCUSDT", snapshot=_SNAPSHOT),
        "ETHUSDT": RefreshOutcome("ETHUSDT", snapshot=_SNAPSHOT),
    }
    for symbol, error in errors.items():
        outcomes[symbol] = RefreshOutcome(symbol, error=error)
    return RoundReport(kind, outcomes, completed_at=0.0)


class TestNavigation:
    def test_scroll_grid_pages(self) -> None:
        state = ApplicationState([f"C{i}USDT" for i in range(6)])
        assert [s.symbol for s in state.visible_symbols()] == [f"C{i}USDT" for i in range(4)]

        state.scroll_down()
        assert [s.symbol for s in state.visible_symbols()] == ["C4USDT", "C5USDT"]

        state.scroll_down()
        assert state.pager.offset == 1

        state.scroll_up()
        state.scroll_up()
        assert state.pager.offset == 0

    def test_scroll_rows_by_one(self) -> None:
        state = ApplicationState(["BTCUSDT", "ETHUSDT", "SOLUSDT"], strategy="rows")
        state.pager.resize(2)
        assert state.pager.offset == 0

        state.scroll_down()
        assert state.pager.offset == 1
        state.scroll_down()
        assert state.pager.offset == 1

        state.scroll_up()
        assert state.pager.offset == 0
        state.scroll_up()
        assert state.pager.offset == 0

    def test_order_is_user_order(self) -> None:
        state = ApplicationState(["SOLUSDT", "BTCUSDT", "ETHUSDT"])
        assert state.symbol_ids() == ["SOLUSDT", "BTCUSDT", "ETHUSDT"]
        assert state.get("BTCUSDT") is state.symbols[1]
        assert state.get("DOGEUSDT") is None

    def test_quit_and_toggle(self, app_state: ApplicationState) -> None:
        assert app_state.running
        app_state.toggle_errors()
        assert app_state.show_errors
        app_state.quit()
        assert not app_state.running


class TestRecordRound:
    def test_clean_refresh_sets_updated(self, app_state: ApplicationState) -> None:
        app_state.record_round(_report(RoundKind.REFRESH), now=10.0)
        assert app_state.status_message == "Updated"
        assert app_state.last_update == 10.0

    def test_refresh_with_errors_counts_them(self, app_state: ApplicationState) -> None:
        app_state.record_round(
            _report(RoundKind.REFRESH, ETHUSDT=NetworkError("ETHUSDT", "timeout")),
            now=10.0,
        )
        assert app_state.status_message == "Updated · 1 error"

        app_state.record_round(
            _report(
                RoundKind.REFRESH,
                BTCUSDT=ApiError("BTCUSDT", "418"),
                ETHUSDT=ApiError("ETHUSDT", "418"),
            ),
            now=11.0,
        )
        assert app_state.status_message == "Updated · 2 errors"

    def test_backfill_does_not_touch_last_update(self, app_state: ApplicationState) -> None:
        app_state.status_message = "Loading history..."
        app_state.record_round(
            _report(RoundKind.BACKFILL, BTCUSDT=NoDataError("BTCUSDT", "empty")),
        )
        assert app_state.last_update is None
        assert app_state.status_message == "History: 1 error"

    def test_errors_keep_every_failed_symbol(self, app_state: ApplicationState) -> None:
        app_state.record_round(
            _report(RoundKind.BACKFILL, BTCUSDT=NoDataError("BTCUSDT", "no history")),
        )
        app_state.record_round(
            _report(RoundKind.REFRESH, ETHUSDT=NetworkError("ETHUSDT", "timeout")),
            now=1.0,
        )
        assert app_state.errors() == {"BTCUSDT": "no history", "ETHUSDT": "timeout"}

    def test_newer_refresh_error_wins_for_same_symbol(self, app_state: ApplicationState) -> None:
        app_state.record_round(
            _report(RoundKind.BACKFILL, BTCUSDT=NoDataError("BTCUSDT", "no history")),
        )
        app_state.record_round(
            _report(RoundKind.REFRESH, BTCUSDT=ApiError("BTCUSDT", "bad symbol")),
            now=1.0,
        )
        assert app_state.errors() == {"BTCUSDT": "bad symbol"}


class TestLastUpdateStr:
    def test_never(self, app_state: ApplicationState) -> None:
        assert app_state.last_update_str(now=5.0) == "Never"

    def test_seconds_and_minutes(self, app_state: ApplicationState) -> None:
        app_state.last_update = 100.0
        assert app_state.last_update_str(now=130.0) == "30s ago"
        assert app_state.last_update_str(now=250.0) == "2m ago"


class TestQuoteAsset:
    def test_labels_use_configured_quote(self) -> None:
        state = ApplicationState(["BTCFDUSD", "ETHFDUSD"], quote_asset="FDUSD")
        assert [s.label for s in state.symbols] == ["BTC/FDUSD", "ETH/FDUSD"]
