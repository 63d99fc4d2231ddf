"""Tests for LiveChart streaming."""

import numpy as np
import pytest

from apex_app.clients import Quote, SimulatedQuoteFeed, generate_history
from apex_app.services import AlertBook, ChartUpdate, LiveChart
from apex_core.models import Bar, IndicatorConfig, IndicatorKind

EMA_20 = IndicatorConfig(kind=IndicatorKind.EMA, period=20)
SMA_50 = IndicatorConfig(kind=IndicatorKind.SMA, period=50)


def _history(n: int = 120) -> list[Bar]:
    return generate_history(n, base_price=150.0, end_ms=1_700_000_000_000, rng=np.random.default_rng(8))


def _quote(price: float, symbol: str = "AAPL", volume_delta: int = 0) -> Quote:
    return Quote(symbol=symbol, price=price, timestamp=1_700_000_000_500, volume_delta=volume_delta)


def _chart(feed=None, alerts=None) -> LiveChart:
    if feed is None:
        feed = SimulatedQuoteFeed({"AAPL": 150.0}, seed=1)
    chart = LiveChart("AAPL", feed, [SMA_50, EMA_20], alerts)
    chart.load(_history())
    return chart


class TestLiveChart:
    """Tests for quote handling and update delivery."""

    @pytest.mark.asyncio
    async def test_quote_updates_last_points(self):
        chart = _chart()
        before = chart.state.snapshot()
        updates: list[ChartUpdate] = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        await chart.handle_quote(_quote(170.0, volume_delta=5))

        assert len(updates) == 1
        update = updates[0]
        assert update.symbol == "AAPL"
        assert update.bar.close == 170.0
        assert set(update.updates) == {"SMA 50", "EMA 20"}
        assert update.updates["EMA 20"].appended is False

        after = chart.state.snapshot()
        assert after["EMA 20"].points[:-1] == before["EMA 20"].points[:-1]
        assert after["EMA 20"].points[-1] != before["EMA 20"].points[-1]

    @pytest.mark.asyncio
    async def test_updates_are_read_only(self):
        chart = _chart()
        updates: list[ChartUpdate] = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        await chart.handle_quote(_quote(151.0))

        with pytest.raises(TypeError):
            updates[0].updates["EMA 20"] = None

    @pytest.mark.asyncio
    async def test_append_bar(self):
        chart = _chart()
        updates: list[ChartUpdate] = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        last = chart.state.bars[-1]
        bar = Bar(
            timestamp=last.timestamp + 86_400_000,
            open=last.close,
            high=last.close + 1,
            low=last.close - 1,
            close=last.close + 0.5,
            volume=100,
        )
        await chart.append_bar(bar)

        assert updates[0].bar == bar
        assert all(u.appended for u in updates[0].updates.values())
        assert len(chart.state.rendered("EMA 20").points) == 121

    @pytest.mark.asyncio
    async def test_other_symbol_ignored(self):
        chart = _chart()
        updates = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        await chart.handle_quote(_quote(10.0, symbol="MSFT"))

        assert updates == []

    @pytest.mark.asyncio
    async def test_no_bars_ignored(self):
        feed = SimulatedQuoteFeed({"AAPL": 150.0}, seed=1)
        chart = LiveChart("AAPL", feed)
        updates = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        await chart.handle_quote(_quote(150.0))

        assert updates == []

    @pytest.mark.asyncio
    async def test_off_update(self):
        chart = _chart()
        updates = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        chart.off_update(on_update)
        await chart.handle_quote(_quote(151.0))

        assert updates == []

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_stop_others(self):
        chart = _chart()
        updates = []

        async def broken(update: ChartUpdate) -> None:
            raise RuntimeError("callback failed")

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(broken)
        chart.on_update(on_update)
        await chart.handle_quote(_quote(151.0))

        assert len(updates) == 1

    @pytest.mark.asyncio
    async def test_checks_alerts(self):
        alerts = AlertBook()
        alert_id = alerts.create_alert("AAPL", "above", 1_000.0)
        chart = _chart(alerts=alerts)

        await chart.handle_quote(_quote(999.0))
        assert alerts.get_alert(alert_id).triggered is False

        await chart.handle_quote(_quote(1_001.0))
        assert alerts.get_alert(alert_id).triggered is True


class TestLiveChartFeed:
    """Tests for the feed subscription."""

    @pytest.mark.asyncio
    async def test_feed_ticks_reach_listeners(self):
        feed = SimulatedQuoteFeed({"AAPL": 150.0}, seed=1)
        chart = _chart(feed)
        updates = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        await chart.start()
        quotes = await feed.tick()

        assert len(updates) == 1
        assert updates[0].bar.close == quotes[0].price

    @pytest.mark.asyncio
    async def test_stop_unsubscribes(self):
        feed = SimulatedQuoteFeed({"AAPL": 150.0}, seed=1)
        chart = _chart(feed)
        updates = []

        async def on_update(update: ChartUpdate) -> None:
            updates.append(update)

        chart.on_update(on_update)
        await chart.start()
        await chart.stop()
        await feed.tick()

        assert updates == []

    def test_track_and_untrack(self):
        chart = _chart()
        rsi = IndicatorConfig(kind=IndicatorKind.RSI, period=14)

        output = chart.track(rsi)
        assert len(output.points) == 120

        chart.untrack("RSI 14")
        assert chart.state.rendered("RSI 14") is None
