"""Abstract market-data client interface.

The refresh coordinator depends only on this contract, keeping
exchange-specific details isolated in the concrete implementation.
Implementations must be safe to call concurrently, one call per symbol.
"""

from abc import ABC, abstractmethod

from tickerwatch.models import PricePoint, Snapshot


class MarketDataClient(ABC):
    """Abstract base class for public market-data clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the connection and load market metadata."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP resources."""
        ...

    @abstractmethod
    async def fetch_snapshot(self, symbol: str) -> Snapshot:
        """Fetch the current price and 24h statistics for one symbol.

        Raises:
            NetworkError: Transport failure or timeout.
            ApiError: The exchange rejected the request.
            DecodeError: The payload lacked a required field.
        """
        ...

    @abstractmethod
    async def fetch_history(self, symbol: str, limit: int) -> list[PricePoint]:
        """Fetch up to ``limit`` recent ``(timestamp_ms, close)`` points, oldest first.

        Raises the same errors as ``fetch_snapshot``, plus ``NoDataError``
        when no usable candle comes back.
        """
        ...
