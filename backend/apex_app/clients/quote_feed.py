"""Real-time quote feed.

QuoteFeed is the boundary the live chart depends on; SimulatedQuoteFeed is
an asyncio implementation that walks each subscribed symbol's price by a
small random move every ``interval`` seconds.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Protocol

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Quote:
    """Latest price for a symbol."""

    symbol: str
    price: float
    timestamp: int  # Unix epoch in milliseconds
    volume_delta: int = 0


class FeedStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


# Type aliases for callbacks
QuoteHandler = Callable[[Quote], Awaitable[None]]
StatusHandler = Callable[[FeedStatus], Awaitable[None]]


class QuoteFeed(Protocol):
    """Source of live quotes, injected into consumers."""

    async def subscribe(self, symbol: str, handler: QuoteHandler) -> None: ...

    async def unsubscribe(self, symbol: str, handler: QuoteHandler) -> None: ...

    def on_status(self, handler: StatusHandler) -> Callable[[], None]: ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...


class SimulatedQuoteFeed:
    """Quote feed producing a bounded random walk per symbol."""

    def __init__(
        self,
        base_prices: dict[str, float],
        interval: float = 2.0,
        noise: float = 0.001,
        seed: int | None = None,
        max_volume_delta: int = 0,
    ):
        """
        Args:
            base_prices: Starting price per symbol
            interval: Seconds between ticks
            noise: Each tick multiplies the price by ``1 + (u - 0.5) * noise``
                with ``u`` uniform in [0, 1)
            seed: Seed for the random generator
            max_volume_delta: Upper bound of the volume added per tick
        """
        self._prices = dict(base_prices)
        self._interval = interval
        self._noise = noise
        self._max_volume_delta = max_volume_delta
        self._rng = np.random.default_rng(seed)
        self._handlers: dict[str, list[QuoteHandler]] = {}
        self._status_handlers: list[StatusHandler] = []
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def is_connected(self) -> bool:
        return self._running

    def price(self, symbol: str) -> float | None:
        """Current simulated price of a symbol."""
        return self._prices.get(symbol)

    def set_base_price(self, symbol: str, price: float) -> None:
        """Set (or reset) the price a symbol walks from."""
        self._prices[symbol] = price

    async def subscribe(self, symbol: str, handler: QuoteHandler) -> None:
        """
        Subscribe to quotes for a symbol.

        Args:
            symbol: Ticker (e.g., "AAPL")
            handler: Async function to call with each Quote
        """
        if symbol not in self._prices:
            logger.warning(f"No base price for {symbol}, it will not tick")
        self._handlers.setdefault(symbol, [])
        if handler not in self._handlers[symbol]:
            self._handlers[symbol].append(handler)

    async def unsubscribe(self, symbol: str, handler: QuoteHandler) -> None:
        handlers = self._handlers.get(symbol)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._handlers[symbol]

    def on_status(self, handler: StatusHandler) -> Callable[[], None]:
        """Register a connection status handler; returns an unregister function."""
        self._status_handlers.append(handler)

        def remove() -> None:
            if handler in self._status_handlers:
                self._status_handlers.remove(handler)

        return remove

    async def connect(self) -> None:
        """Start ticking."""
        if self._running:
            return

        self._running = True
        logger.info(f"Simulated quote feed connected ({self._interval}s interval)")
        await self._notify_status(FeedStatus.CONNECTED)
        self._task = asyncio.create_task(self._run())

    async def disconnect(self) -> None:
        """Stop ticking."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Simulated quote feed disconnected")
        await self._notify_status(FeedStatus.DISCONNECTED)

    async def tick(self) -> list[Quote]:
        """Advance every subscribed symbol by one step and deliver the quotes."""
        now = int(time.time() * 1000)
        quotes = []

        for symbol, handlers in list(self._handlers.items()):
            price = self._prices.get(symbol)
            if price is None:
                continue

            price *= 1 + (self._rng.random() - 0.5) * self._noise
            self._prices[symbol] = price

            volume_delta = 0
            if self._max_volume_delta > 0:
                volume_delta = int(self._rng.integers(0, self._max_volume_delta + 1))

            quote = Quote(symbol=symbol, price=price, timestamp=now, volume_delta=volume_delta)
            quotes.append(quote)
            for handler in list(handlers):
                await self._safe_callback(handler, quote)

        return quotes

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval)
            await self.tick()

    async def _safe_callback(self, handler: QuoteHandler, quote: Quote) -> None:
        """Safely execute async callback."""
        try:
            await handler(quote)
        except Exception as e:
            logger.error(f"Quote handler error for {quote.symbol}: {e}")

    async def _notify_status(self, status: FeedStatus) -> None:
        for handler in list(self._status_handlers):
            try:
                await handler(status)
            except Exception as e:
                logger.error(f"Status handler error: {e}")
