"""Market data clients."""

from apex_app.clients.history import TIMEFRAME_MS, generate_history
from apex_app.clients.quote_feed import (
    FeedStatus,
    Quote,
    QuoteFeed,
    QuoteHandler,
    SimulatedQuoteFeed,
    StatusHandler,
)

__all__ = [
    "TIMEFRAME_MS",
    "generate_history",
    "FeedStatus",
    "Quote",
    "QuoteFeed",
    "QuoteHandler",
    "SimulatedQuoteFeed",
    "StatusHandler",
]
