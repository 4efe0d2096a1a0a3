"""Per-symbol snapshot fields plus the owned rolling price history."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from tickerwatch.formatting import format_compact_currency
from tickerwatch.models import PricePoint, Snapshot
from tickerwatch.state.price_series import DEFAULT_CAPACITY, PriceSeries

DEFAULT_QUOTE = "USDT"


def display_label(symbol: str, quote_asset: str = DEFAULT_QUOTE) -> str:
    """Turn an exchange id into a readable pair: ``BTCUSDT`` -> ``BTC/USDT``.

    Identifiers that do not end in ``quote_asset`` (or are nothing but the
    quote) are returned unchanged.
    """
    if symbol.endswith(quote_asset) and len(symbol) > len(quote_asset):
        return f"{symbol[: -len(quote_asset)]}/{quote_asset}"
    return symbol


@dataclass(frozen=True)
class ChartProjection:
    """Everything a chart pane needs, already computed."""

    points: list[tuple[float, float]]
    x_bounds: tuple[float, float]
    y_bounds: tuple[float, float]
    x_labels: list[str]
    y_labels: list[str]


@dataclass
class SymbolState:
    """Live state for one watched symbol.

    The label is derived from the symbol once, at creation. Failed refreshes
    never touch this object, so stale-but-valid data stays on screen.
    """

    symbol: str
    capacity: int = DEFAULT_CAPACITY
    quote_asset: str = DEFAULT_QUOTE
    label: str = field(init=False)
    price: float = 0.0
    change_24h: float = 0.0
    high_24h: float = 0.0
    low_24h: float = 0.0
    volume_24h: float = 0.0
    history: PriceSeries = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.label = display_label(self.symbol, self.quote_asset)
        self.history = PriceSeries(self.capacity)

    @property
    def is_up(self) -> bool:
        return self.change_24h >= 0

    def apply_snapshot(self, snapshot: Snapshot, timestamp: int) -> None:
        """Copy the snapshot fields and append its price to the history."""
        self.price = snapshot.last_price
        self.change_24h = snapshot.percent_change_24h
        self.high_24h = snapshot.high_24h
        self.low_24h = snapshot.low_24h
        self.volume_24h = snapshot.volume_24h
        self.history.append(timestamp, snapshot.last_price)

    def load_history(self, points: Iterable[PricePoint]) -> None:
        """Replace the history; the newest historical price becomes current."""
        last_price = self.history.bulk_load(points)
        if last_price is not None:
            self.price = last_price

    def chart_projection(self) -> ChartProjection:
        y_min, y_max = self.history.value_bounds()
        # Keep a full-width X axis while the buffer is still filling
        x_max = float(max(len(self.history), self.history.capacity))
        return ChartProjection(
            points=self.history.indexed_series(),
            x_bounds=(0.0, x_max),
            y_bounds=(y_min, y_max),
            x_labels=self.history.axis_time_labels(),
            y_labels=[format_compact_currency(y_min), format_compact_currency(y_max)],
        )
