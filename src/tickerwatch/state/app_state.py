"""Application-wide state owned by the control loop.

Only the control loop mutates this object. Refresh rounds hand back
immutable ``RoundReport`` values that are merged in after the fan-in, so no
locking is needed.
"""

import time

from tickerwatch.formatting import format_age
from tickerwatch.layout import LayoutStrategy, Pager
from tickerwatch.models import RoundKind, RoundReport
from tickerwatch.state.price_series import DEFAULT_CAPACITY
from tickerwatch.state.symbol_state import DEFAULT_QUOTE, SymbolState


class ApplicationState:
    """Ordered symbol states, pagination, status and refresh bookkeeping."""

    def __init__(
        self,
        symbols: list[str],
        capacity: int = DEFAULT_CAPACITY,
        strategy: LayoutStrategy | str = LayoutStrategy.GRID,
        quote_asset: str = DEFAULT_QUOTE,
    ) -> None:
        self.symbols: list[SymbolState] = [
            SymbolState(s, capacity=capacity, quote_asset=quote_asset) for s in symbols
        ]
        self._by_symbol = {state.symbol: state for state in self.symbols}
        self.pager = Pager(len(self.symbols), strategy)
        self.running = True
        self.status_message = "Starting..."
        self.show_errors = False
        self.last_update: float | None = None  # monotonic seconds
        self.reports: dict[RoundKind, RoundReport] = {}

    def get(self, symbol: str) -> SymbolState | None:
        return self._by_symbol.get(symbol)

    def symbol_ids(self) -> list[str]:
        return [state.symbol for state in self.symbols]

    def visible_symbols(self) -> list[SymbolState]:
        return self.pager.window(self.symbols)

    def scroll_up(self) -> None:
        self.pager.prev()

    def scroll_down(self) -> None:
        self.pager.next()

    def quit(self) -> None:
        self.running = False

    def toggle_errors(self) -> None:
        self.show_errors = not self.show_errors

    def record_round(self, report: RoundReport, now: float | None = None) -> None:
        """Store a finished round and derive the status line from it."""
        self.reports[report.kind] = report
        failed = report.failed
        if report.kind is RoundKind.REFRESH:
            self.last_update = time.monotonic() if now is None else now
            if failed == 0:
                self.status_message = "Updated"
            else:
                noun = "error" if failed == 1 else "errors"
                self.status_message = f"Updated · {failed} {noun}"
        elif failed:
            noun = "error" if failed == 1 else "errors"
            self.status_message = f"History: {failed} {noun}"

    def errors(self) -> dict[str, str]:
        """Symbol -> latest error message across the most recent rounds.

        A symbol that failed backfill but refreshed fine afterwards is still
        listed, since its chart lacks history.
        """
        merged: dict[str, str] = {}
        for kind in (RoundKind.BACKFILL, RoundKind.REFRESH):
            report = self.reports.get(kind)
            if report is not None:
                merged.update(report.failures)
        return merged

    def last_update_str(self, now: float | None = None) -> str:
        if self.last_update is None:
            return format_age(None)
        current = time.monotonic() if now is None else now
        return format_age(current - self.last_update)
