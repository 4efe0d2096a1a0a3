"""Fixed-capacity rolling price history for one symbol.

Charts plot the buffer rank on the X axis rather than the timestamp, so
uneven sampling (startup backfill at 15m candles followed by live refreshes
every interval) still draws as a continuous line.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from datetime import datetime

from tickerwatch.models import PricePoint

DEFAULT_CAPACITY = 60
EMPTY_BOUNDS = (0.0, 100.0)
TIME_PLACEHOLDER = "--:--"

_BOUNDS_PADDING = 0.1


def format_clock(timestamp_ms: int) -> str:
    """Format a unix-millisecond timestamp as local ``HH:MM``.

    Returns the placeholder when the timestamp cannot be converted.
    """
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M")
    except (OverflowError, OSError, ValueError):
        return TIME_PLACEHOLDER


class PriceSeries:
    """Oldest-first FIFO buffer of ``(timestamp_ms, price)`` pairs."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._points: deque[PricePoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen or 0

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PriceSeries):
            return NotImplemented
        return self.capacity == other.capacity and list(self) == list(other)

    def __repr__(self) -> str:
        return f"PriceSeries(capacity={self.capacity}, points={len(self)})"

    def append(self, timestamp: int, price: float) -> None:
        """Add the newest point, evicting the oldest one when full."""
        self._points.append((timestamp, price))

    def bulk_load(self, points: Iterable[PricePoint]) -> float | None:
        """Replace the whole buffer with an oldest-first sequence.

        Only the newest ``capacity`` points are kept. Returns the price of the
        last point, or None when ``points`` is empty.
        """
        self._points.clear()
        self._points.extend((int(ts), float(price)) for ts, price in points)
        last = self.last()
        return last[1] if last is not None else None

    def last(self) -> PricePoint | None:
        return self._points[-1] if self._points else None

    def prices(self) -> list[float]:
        return [price for _, price in self._points]

    def indexed_series(self) -> list[tuple[float, float]]:
        """Return ``(rank, price)`` pairs, rank being the 0-based buffer position."""
        return [(float(i), price) for i, (_, price) in enumerate(self._points)]

    def value_bounds(self) -> tuple[float, float]:
        """Return the price range padded by 10% of its span on each side.

        An empty series yields the fixed ``(0, 100)`` range.
        """
        if not self._points:
            return EMPTY_BOUNDS
        prices = self.prices()
        low, high = min(prices), max(prices)
        padding = (high - low) * _BOUNDS_PADDING
        return low - padding, high + padding

    def axis_time_labels(self) -> list[str]:
        """Return local ``HH:MM`` labels for the oldest, middle and newest time.

        The middle label is the mean of the oldest and newest timestamps, not
        an actual buffer entry.
        """
        if not self._points:
            return [TIME_PLACEHOLDER] * 3
        first = self._points[0][0]
        last = self._points[-1][0]
        middle = (first + last) // 2
        return [format_clock(first), format_clock(middle), format_clock(last)]
