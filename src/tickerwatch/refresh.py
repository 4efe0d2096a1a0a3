"""Concurrent multi-symbol refresh rounds.

Each round fans out one request per symbol with asyncio.gather, waits for
all of them, and only then merges the results into the application state.
Results are matched back by the symbol carried in each outcome, never by
position. One symbol's failure leaves that symbol's state untouched and
does not affect its siblings. Nothing is retried: a failed symbol is simply
fetched again in the next scheduled round.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from tickerwatch.exceptions import MarketDataError
from tickerwatch.logging import get_logger
from tickerwatch.market_data.client import MarketDataClient
from tickerwatch.models import RefreshOutcome, RoundKind, RoundReport
from tickerwatch.state.app_state import ApplicationState

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RefreshCoordinator:
    """Runs backfill and snapshot rounds against a market-data client.

    Args:
        client: Market-data collaborator.
        clock_ms: Wall-clock source (unix ms) stamped on appended prices.
    """

    def __init__(
        self,
        client: MarketDataClient,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._client = client
        self._clock_ms = clock_ms

    async def backfill(
        self,
        state: ApplicationState,
        on_start: Callable[[], None] | None = None,
    ) -> RoundReport:
        """Load one window of history for every symbol.

        ``on_start`` runs after the status is set and before any request,
        so a caller can show the loading state.
        """
        state.status_message = "Loading history..."
        if on_start is not None:
            on_start()
        symbols = state.symbol_ids()
        limit = state.symbols[0].history.capacity if state.symbols else 0

        outcomes = await self._fan_out(
            symbols,
            lambda symbol: self._fetch_history(symbol, limit),
        )

        for outcome in outcomes:
            symbol_state = state.get(outcome.symbol)
            if symbol_state is None:
                continue
            if outcome.ok and outcome.history is not None:
                symbol_state.load_history(outcome.history)

        report = RoundReport(RoundKind.BACKFILL, {o.symbol: o for o in outcomes})
        state.record_round(report)
        logger.info(
            "backfill_complete",
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report

    async def refresh_all(self, state: ApplicationState) -> RoundReport:
        """Fetch a snapshot for every symbol and append the new prices."""
        symbols = state.symbol_ids()
        outcomes = await self._fan_out(symbols, self._fetch_snapshot)

        timestamp = self._clock_ms()
        for outcome in outcomes:
            symbol_state = state.get(outcome.symbol)
            if symbol_state is None:
                continue
            if outcome.ok and outcome.snapshot is not None:
                symbol_state.apply_snapshot(outcome.snapshot, timestamp)

        report = RoundReport(RoundKind.REFRESH, {o.symbol: o for o in outcomes})
        state.record_round(report)
        logger.info(
            "refresh_complete",
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report

    async def _fan_out(
        self,
        symbols: list[str],
        fetch: Callable[[str], Awaitable[RefreshOutcome]],
    ) -> list[RefreshOutcome]:
        results = await asyncio.gather(
            *(fetch(symbol) for symbol in symbols),
            return_exceptions=True,
        )

        outcomes: list[RefreshOutcome] = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                logger.error(
                    "unexpected_fetch_error",
                    symbol=symbol,
                    error=str(result),
                    exc_info=result,
                )
                outcomes.append(RefreshOutcome(symbol=symbol, error=result))
            else:
                outcomes.append(result)
        return outcomes

    async def _fetch_snapshot(self, symbol: str) -> RefreshOutcome:
        try:
            snapshot = await self._client.fetch_snapshot(symbol)
        except MarketDataError as e:
            logger.warning("snapshot_fetch_failed", symbol=symbol, error=str(e))
            return RefreshOutcome(symbol=symbol, error=e)
        return RefreshOutcome(symbol=symbol, snapshot=snapshot)

    async def _fetch_history(self, symbol: str, limit: int) -> RefreshOutcome:
        try:
            history = await self._client.fetch_history(symbol, limit)
        except MarketDataError as e:
            logger.warning("history_fetch_failed", symbol=symbol, error=str(e))
            return RefreshOutcome(symbol=symbol, error=e)
        return RefreshOutcome(symbol=symbol, history=history)
