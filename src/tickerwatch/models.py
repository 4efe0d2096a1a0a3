"""Shared value objects produced by the market-data layer and refresh rounds.

Everything here is created during the concurrent fetch phase and only read
afterwards, so the dataclasses are frozen.
"""

import time
from dataclasses import dataclass, field
from enum import Enum

# (timestamp in unix milliseconds, price)
PricePoint = tuple[int, float]


class RoundKind(str, Enum):
    """Which operation a refresh round performed."""

    BACKFILL = "backfill"
    REFRESH = "refresh"


@dataclass(frozen=True)
class Snapshot:
    """Current price and 24h statistics for one symbol."""

    last_price: float
    percent_change_24h: float
    high_24h: float
    low_24h: float
    volume_24h: float


@dataclass(frozen=True)
class RefreshOutcome:
    """Result of one symbol's fetch within a round.

    Exactly one of ``snapshot`` / ``history`` / ``error`` is meaningful,
    depending on the round kind and whether the fetch succeeded.
    """

    symbol: str
    snapshot: Snapshot | None = None
    history: list[PricePoint] | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RoundReport:
    """All per-symbol outcomes of one round, keyed by symbol."""

    kind: RoundKind
    outcomes: dict[str, RefreshOutcome]
    completed_at: float = field(default_factory=time.time)

    @property
    def failures(self) -> dict[str, str]:
        """Symbol -> error message for every failed symbol, in symbol order."""
        return {
            symbol: str(outcome.error)
            for symbol, outcome in self.outcomes.items()
            if outcome.error is not None
        }

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes.values() if outcome.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded
