"""Live chart: binds a ChartState to a quote feed.

Each quote runs one recompute-and-align cycle on the event loop and the
resulting last-point deltas are forwarded to the registered listeners.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Awaitable, Callable, Iterable, Mapping, Sequence

from apex_core.alignment import ChartState, PointUpdate
from apex_core.models.bar import Bar
from apex_core.models.config import IndicatorConfig
from apex_core.models.series import IndicatorOutput
from apex_core.presets import DEFAULT_LAYOUT

from apex_app.clients.quote_feed import Quote, QuoteFeed
from apex_app.services.alerts import AlertBook

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ChartUpdate:
    """One streaming update of a chart."""

    symbol: str
    bar: Bar  # Last bar after the update
    updates: Mapping[str, PointUpdate | None]


UpdateCallback = Callable[[ChartUpdate], Awaitable[None]]


class LiveChart:
    """Streaming indicator chart for one symbol."""

    def __init__(
        self,
        symbol: str,
        feed: QuoteFeed,
        configs: Iterable[IndicatorConfig] = DEFAULT_LAYOUT,
        alerts: AlertBook | None = None,
    ):
        self.symbol = symbol
        self._feed = feed
        self._alerts = alerts
        self._state = ChartState(configs)
        self._callbacks: list[UpdateCallback] = []
        self._started = False

    @property
    def state(self) -> ChartState:
        return self._state

    def on_update(self, callback: UpdateCallback) -> None:
        """Register callback for chart updates."""
        self._callbacks.append(callback)

    def off_update(self, callback: UpdateCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def load(self, bars: Sequence[Bar]) -> Mapping[str, IndicatorOutput | None]:
        """Load history and render every indicator in full."""
        return MappingProxyType(self._state.load(bars))

    def track(self, config: IndicatorConfig) -> IndicatorOutput | None:
        return self._state.track(config)

    def untrack(self, indicator_id: str) -> None:
        self._state.untrack(indicator_id)

    async def start(self) -> None:
        """Subscribe to the feed."""
        if self._started:
            return
        self._started = True
        await self._feed.subscribe(self.symbol, self.handle_quote)
        logger.info(f"Live chart started for {self.symbol}")

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        await self._feed.unsubscribe(self.symbol, self.handle_quote)
        logger.info(f"Live chart stopped for {self.symbol}")

    async def handle_quote(self, quote: Quote) -> None:
        """Fold a quote into the last bar and publish the deltas."""
        if quote.symbol != self.symbol:
            return
        if not self._state.bars:
            logger.debug(f"Ignoring quote for {self.symbol}: no bars loaded")
            return

        updates = self._state.apply_quote(quote.price, quote.volume_delta)
        if self._alerts is not None:
            self._alerts.check_alert(self.symbol, quote.price)
        await self._publish(updates)

    async def append_bar(self, bar: Bar) -> None:
        """Start a new bar and publish the deltas."""
        updates = self._state.append_bar(bar)
        await self._publish(updates)

    async def _publish(self, updates: Mapping[str, PointUpdate | None]) -> None:
        update = ChartUpdate(
            symbol=self.symbol,
            bar=self._state.bars[-1],
            updates=updates,
        )
        for callback in list(self._callbacks):
            await self._safe_callback(callback, update)

    async def _safe_callback(self, callback: UpdateCallback, update: ChartUpdate) -> None:
        """Safely execute async callback."""
        try:
            await callback(update)
        except Exception as e:
            logger.error(f"Chart update callback error: {e}")
