"""Simulated price history provider.

Generates a random-walk OHLCV series with a slight upward drift, one bar per
timeframe interval, ending at ``end_ms``.
"""

import time

import numpy as np

from apex_core.models.bar import Bar

# Timeframe interval in milliseconds
TIMEFRAME_MS: dict[str, int] = {
    "1m": 60_000,
    "5m": 300_000,
    "15m": 900_000,
    "30m": 1_800_000,
    "1h": 3_600_000,
    "4h": 14_400_000,
    "1d": 86_400_000,
}

DRIFT = 0.0005
VOLATILITY = 0.02
WICK = 0.01
MIN_VOLUME = 10_000_000
MAX_VOLUME = 60_000_000


def generate_history(
    length: int,
    base_price: float = 100.0,
    timeframe: str = "1d",
    end_ms: int | None = None,
    rng: np.random.Generator | None = None,
) -> list[Bar]:
    """
    Generate ``length`` bars of simulated history.

    Args:
        length: Number of bars
        base_price: Open of the first bar
        timeframe: Interval key of TIMEFRAME_MS
        end_ms: Timestamp of the last bar (defaults to now)
        rng: Random generator (pass a seeded one for reproducible data)

    Raises:
        KeyError: If the timeframe is unknown
    """
    interval = TIMEFRAME_MS[timeframe]
    if end_ms is None:
        end_ms = int(time.time() * 1000)
    if rng is None:
        rng = np.random.default_rng()

    moves = DRIFT + VOLATILITY * (rng.random(length) - 0.5)
    upper = 1 + rng.random(length) * WICK
    lower = 1 - rng.random(length) * WICK
    volumes = rng.integers(MIN_VOLUME, MAX_VOLUME, size=length)

    bars = []
    price = base_price
    for i in range(length):
        open_ = price
        price += price * moves[i]
        bars.append(
            Bar(
                timestamp=end_ms - (length - i - 1) * interval,
                open=open_,
                high=max(open_, price) * upper[i],
                low=min(open_, price) * lower[i],
                close=price,
                volume=int(volumes[i]),
            )
        )
    return bars
