"""Custom exceptions for the ticker watcher.

Market-data errors are per-symbol and per-round: they degrade the display
(stale data plus a status message) but never stop the process. The only
fatal condition is starting without any valid symbol.
"""


class WatchError(Exception):
    """Base exception for all watcher errors."""


class MarketDataError(WatchError):
    """A fetch for one symbol failed. Carries the symbol it belongs to."""

    def __init__(self, symbol: str, message: str) -> None:
        super().__init__(message)
        self.symbol = symbol


class NetworkError(MarketDataError):
    """Raised on transport failures and request timeouts."""


class ApiError(MarketDataError):
    """Raised when the exchange answers with a non-success status."""


class DecodeError(MarketDataError):
    """Raised when a response payload is missing fields or malformed."""


class NoDataError(MarketDataError):
    """Raised when a history request returns no usable price points."""


class NoValidSymbolsError(WatchError):
    """Raised at startup when no requested symbol survives validation.

    ``skipped`` lists the rejected entries as the user gave them.
    """

    def __init__(self, message: str, skipped: list[str] | None = None) -> None:
        super().__init__(message)
        self.skipped = list(skipped or [])
