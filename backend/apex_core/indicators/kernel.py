"""Series math kernel: numeric recurrences shared by every indicator.

All functions are pure and keep no state between calls. They accept any
sequence of numbers and return NumPy arrays (or a float).

Empty input raises InsufficientDataError. A window wider than the data is
not an error: the windowed functions return an empty array and each
indicator decides how to degrade from there.
"""

from typing import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from apex_core.errors import InsufficientDataError
from apex_core.validation import require_period


def _as_array(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1 or arr.size < 1:
        raise InsufficientDataError("Series math requires at least one value")
    return arr


def moving_sum(values: Sequence[float], period: int) -> np.ndarray:
    """Sum of each trailing window of ``period`` values.

    Returns ``len(values) - period + 1`` sums; the first covers
    ``values[0:period]``. Empty when ``period > len(values)``.
    """
    require_period("period", period)
    arr = _as_array(values)
    if period > arr.size:
        return np.empty(0, dtype=np.float64)
    return sliding_window_view(arr, period).sum(axis=1)


def simple_moving_average(values: Sequence[float], period: int) -> np.ndarray:
    """Arithmetic mean of each trailing window (same shape as moving_sum)."""
    return moving_sum(values, period) / period


def exponential_recurrence(
    values: Sequence[float],
    smoothing_factor: float,
    seed: float | None = None,
) -> np.ndarray:
    """Apply ``out[i] = values[i] * k + out[i-1] * (1 - k)``.

    Args:
        values: Input series
        smoothing_factor: k, in (0, 1]
        seed: First output value (defaults to ``values[0]``)

    Returns:
        Array with the same length as ``values``
    """
    arr = _as_array(values)
    k = smoothing_factor
    result = np.empty_like(arr)

    prev = arr[0] if seed is None else float(seed)
    result[0] = prev
    for i in range(1, arr.size):
        prev = arr[i] * k + prev * (1 - k)
        result[i] = prev

    return result


def wilder_recurrence(values: Sequence[float], period: int, seed: float) -> np.ndarray:
    """Wilder's smoothing: ``avg = (avg * (period - 1) + value) / period``.

    ``seed`` is the average before the first value; one output is produced
    per input value.
    """
    require_period("period", period)
    arr = _as_array(values)
    result = np.empty_like(arr)

    avg = float(seed)
    for i in range(arr.size):
        avg = (avg * (period - 1) + arr[i]) / period
        result[i] = avg

    return result


def population_variance(window: Sequence[float], mean: float) -> float:
    """Population variance of ``window`` around a precomputed ``mean``."""
    arr = _as_array(window)
    return float(np.sum((arr - mean) ** 2) / arr.size)
