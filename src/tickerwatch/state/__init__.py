"""Live-data state: rolling price history, per-symbol state, application state."""

from tickerwatch.state.app_state import ApplicationState
from tickerwatch.state.price_series import PriceSeries
from tickerwatch.state.symbol_state import ChartProjection, SymbolState, display_label

__all__ = [
    "ApplicationState",
    "ChartProjection",
    "PriceSeries",
    "SymbolState",
    "display_label",
]
