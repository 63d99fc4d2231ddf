"""Indicator alignment onto the bars' timestamp axis.

Indicators stamp their output with placeholder timestamps, and their output
can be shorter than the bar history (SMA and Bollinger Bands lose
``period - 1`` points to warm-up). Alignment ignores those timestamps and
anchors the output to the END of the master axis: for N bars and M output
points, point ``i`` gets ``timestamps[N - M + i]``. Compound points (MACD,
Bollinger) carry one timestamp for all their fields.

ChartState keeps a rendered copy of every tracked indicator for streaming
updates. On each quote or new bar it recomputes the indicator over the full
history but only replaces (or appends) the LAST rendered point. Earlier
points are left as they were rendered, so recurrences such as EMA/RSI/MACD
may drift from a fresh full render until the next ``load``.
"""

import logging
import math
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from apex_core.errors import (
    AlignmentMismatchError,
    IndicatorError,
    InsufficientDataError,
    InvalidParameterError,
)
from apex_core.indicators import compute_indicator
from apex_core.models.bar import Bar, bar_timestamps
from apex_core.models.config import IndicatorConfig, IndicatorKind
from apex_core.models.series import OUTPUT_TYPES, IndicatorOutput, IndicatorPoint

logger = logging.getLogger(__name__)


def align_timestamps(timestamps: Sequence[int], length: int) -> list[int]:
    """Timestamps for an output of ``length`` points, anchored to the end.

    Raises:
        AlignmentMismatchError: If the output is longer than the axis
    """
    if length > len(timestamps):
        raise AlignmentMismatchError(
            f"Indicator output has {length} points but the axis only has {len(timestamps)}"
        )
    return list(timestamps[len(timestamps) - length:])


def align_output(timestamps: Sequence[int], output: IndicatorOutput) -> IndicatorOutput:
    """Return a copy of ``output`` stamped with the master axis timestamps."""
    if not isinstance(output, OUTPUT_TYPES):
        raise TypeError(f"Unsupported indicator output: {type(output).__name__}")

    stamps = align_timestamps(timestamps, len(output.points))
    points = tuple(
        replace(point, timestamp=ts) for point, ts in zip(output.points, stamps)
    )
    return replace(output, points=points)


def compute_aligned(bars: Sequence[Bar], config: IndicatorConfig) -> IndicatorOutput:
    """Compute an indicator and align it onto the bars' own timestamps."""
    output = compute_indicator(bars, config)
    return align_output(bar_timestamps(bars), output)


def compute_batch(
    bars: Sequence[Bar],
    configs: Iterable[IndicatorConfig],
) -> dict[str, IndicatorOutput | None]:
    """Compute and align several indicators, isolating failures.

    A failing indicator maps to None; the others are still computed.
    """
    results: dict[str, IndicatorOutput | None] = {}
    for config in configs:
        try:
            results[config.id] = compute_aligned(bars, config)
        except IndicatorError as e:
            logger.warning(f"Indicator {config.id} failed: {e}")
            results[config.id] = None
    return results


@dataclass(slots=True, frozen=True)
class PointUpdate:
    """Last-point delta for one tracked indicator."""

    indicator_id: str
    kind: IndicatorKind
    point: IndicatorPoint
    appended: bool  # True = new point added, False = last point replaced


class ChartState:
    """Rendered indicator series for one chart, updated tick by tick.

    Holds a private copy of the bar history; callers' sequences are never
    mutated.
    """

    def __init__(self, configs: Iterable[IndicatorConfig] = ()):
        self._configs: dict[str, IndicatorConfig] = {}
        self._bars: list[Bar] = []
        self._rendered: dict[str, IndicatorOutput | None] = {}
        for config in configs:
            self.track(config)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def track(self, config: IndicatorConfig) -> IndicatorOutput | None:
        """Start tracking an indicator, rendering it if bars are loaded."""
        self._configs[config.id] = config
        if not self._bars:
            self._rendered[config.id] = None
            return None
        rendered = compute_batch(self._bars, [config])[config.id]
        self._rendered[config.id] = rendered
        return rendered

    def untrack(self, indicator_id: str) -> None:
        """Stop tracking an indicator."""
        self._configs.pop(indicator_id, None)
        self._rendered.pop(indicator_id, None)

    @property
    def configs(self) -> tuple[IndicatorConfig, ...]:
        return tuple(self._configs.values())

    @property
    def bars(self) -> tuple[Bar, ...]:
        return tuple(self._bars)

    def rendered(self, indicator_id: str) -> IndicatorOutput | None:
        """Currently rendered (aligned) output for an indicator."""
        return self._rendered.get(indicator_id)

    def snapshot(self) -> dict[str, IndicatorOutput | None]:
        """Copy of the rendered outputs by indicator id."""
        return dict(self._rendered)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def load(self, bars: Sequence[Bar]) -> dict[str, IndicatorOutput | None]:
        """Replace the history and render every tracked indicator in full."""
        self._bars = list(bars)
        self._rendered = compute_batch(self._bars, self._configs.values())
        logger.debug(
            f"Loaded {len(self._bars)} bars, rendered {len(self._rendered)} indicators"
        )
        return self.snapshot()

    def apply_quote(
        self,
        price: float,
        volume_delta: int = 0,
    ) -> Mapping[str, PointUpdate | None]:
        """Fold a live price into the last bar and refresh last points.

        The last bar's close becomes ``price``, its high/low stretch to
        include it, and ``volume_delta`` is added to its volume.

        Raises:
            InsufficientDataError: If no bars are loaded
            InvalidParameterError: If price is not finite or volume_delta is negative
        """
        if not self._bars:
            raise InsufficientDataError("Cannot apply a quote before bars are loaded")
        if not math.isfinite(price):
            raise InvalidParameterError(f"Quote price must be finite, got {price!r}")
        if volume_delta < 0:
            raise InvalidParameterError(f"volume_delta must be >= 0, got {volume_delta}")

        last = self._bars[-1]
        self._bars[-1] = last.model_copy(
            update={
                "close": price,
                "high": max(last.high, price),
                "low": min(last.low, price),
                "volume": last.volume + volume_delta,
            }
        )
        return self._refresh_last_points()

    def append_bar(self, bar: Bar) -> Mapping[str, PointUpdate | None]:
        """Append a new bar and extend each rendered series by one point."""
        self._bars.append(bar)
        return self._refresh_last_points()

    def _refresh_last_points(self) -> Mapping[str, PointUpdate | None]:
        updates: dict[str, PointUpdate | None] = {}

        for indicator_id, config in self._configs.items():
            try:
                output = compute_aligned(self._bars, config)
            except IndicatorError as e:
                logger.warning(f"Indicator {indicator_id} update failed: {e}")
                updates[indicator_id] = None
                continue

            if not output.points:
                # Still warming up
                updates[indicator_id] = None
                continue

            last_point = output.points[-1]
            rendered = self._rendered.get(indicator_id)

            if rendered is None or not rendered.points:
                self._rendered[indicator_id] = output
                appended = True
            elif rendered.points[-1].timestamp == last_point.timestamp:
                self._rendered[indicator_id] = replace(
                    rendered, points=rendered.points[:-1] + (last_point,)
                )
                appended = False
            else:
                self._rendered[indicator_id] = replace(
                    rendered, points=rendered.points + (last_point,)
                )
                appended = True

            updates[indicator_id] = PointUpdate(
                indicator_id=indicator_id,
                kind=config.kind,
                point=last_point,
                appended=appended,
            )

        return MappingProxyType(updates)


def latest_values(outputs: Mapping[str, IndicatorOutput | None]) -> dict[str, IndicatorPoint | None]:
    """Last point of each output (None for failed or empty outputs)."""
    return {
        key: output.points[-1] if output is not None and output.points else None
        for key, output in outputs.items()
    }
