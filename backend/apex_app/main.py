"""Main application entry point.

Runs the signal engine against simulated data: prints the multi-timeframe
consensus for each symbol, then streams live indicator updates until
interrupted.
"""

import asyncio
import logging

# Configure logging FIRST, before any other imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logging.getLogger("asyncio").setLevel(logging.WARNING)

import numpy as np

from apex_core.consensus import MultiTimeframeEngine
from apex_core.models.signal import ConsensusResult
from apex_core.presets import DEFAULT_LAYOUT

from apex_app.clients import FeedStatus, SimulatedQuoteFeed, generate_history
from apex_app.config import Settings, get_settings
from apex_app.services import AlertBook, ChartUpdate, LiveChart

logger = logging.getLogger(__name__)


def analyze_symbol(
    symbol: str,
    settings: Settings,
    rng: np.random.Generator,
) -> ConsensusResult:
    """Generate history for every configured timeframe and build the consensus."""
    logger.debug(f"Analyzing {symbol} on {', '.join(settings.timeframes)}")
    bars_by_timeframe = {
        timeframe: generate_history(
            settings.history_length,
            base_price=settings.base_price,
            timeframe=timeframe,
            rng=rng,
        )
        for timeframe in settings.timeframes
    }
    engine = MultiTimeframeEngine(settings.analysis_config())
    return engine.analyze(bars_by_timeframe)


def build_live_charts(
    settings: Settings,
    feed: SimulatedQuoteFeed,
    alerts: AlertBook,
    rng: np.random.Generator,
) -> list[LiveChart]:
    """Create one daily chart per symbol, loaded with simulated history."""
    charts = []
    for symbol in settings.symbols:
        chart = LiveChart(symbol, feed, DEFAULT_LAYOUT, alerts)
        chart.load(
            generate_history(settings.history_length, base_price=settings.base_price, rng=rng)
        )
        charts.append(chart)
    return charts


async def log_update(update: ChartUpdate) -> None:
    values = []
    for indicator_id, delta in update.updates.items():
        if delta is not None:
            values.append(f"{indicator_id}={getattr(delta.point, 'value', delta.point)}")
    logger.info(f"{update.symbol} {update.bar.close:.2f} | {', '.join(values)}")


async def log_status(status: FeedStatus) -> None:
    logger.info(f"Feed status: {status.value}")


async def run(settings: Settings) -> None:
    """Run the engine until cancelled."""
    logging.getLogger().setLevel(settings.log_level.upper())
    rng = np.random.default_rng(settings.feed_seed)

    for symbol in settings.symbols:
        result = analyze_symbol(symbol, settings, rng)
        logger.info(
            f"{symbol}: {result.overall_bias.value} "
            f"(strength {result.overall_strength}, {result.agreement}) "
            f"- {result.conflict_description}"
        )

    alerts = AlertBook()
    feed = SimulatedQuoteFeed(
        {},
        interval=settings.feed_interval,
        noise=settings.feed_noise,
        seed=settings.feed_seed,
        max_volume_delta=settings.feed_max_volume_delta,
    )
    charts = build_live_charts(settings, feed, alerts, rng)
    for chart in charts:
        last_close = chart.state.bars[-1].close
        feed.set_base_price(chart.symbol, last_close)
        alerts.create_alert(
            chart.symbol,
            "above",
            round(last_close * 1.01, 2),
            message=f"{chart.symbol} up 1%",
        )
        chart.on_update(log_update)
        await chart.start()

    feed.on_status(log_status)
    await feed.connect()
    try:
        await asyncio.Event().wait()
    finally:
        for chart in charts:
            await chart.stop()
        await feed.disconnect()


def main():
    """Run the application."""
    try:
        asyncio.run(run(get_settings()))
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
