"""Indicator registry mapping each IndicatorKind to its computation.

Usage:
    @register_indicator(IndicatorKind.SMA)
    def _compute_sma(bars, config, anchor_ms):
        ...

    output = compute_indicator(bars, config)
    kinds = list_indicators()
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from apex_core.models.bar import Bar
from apex_core.models.config import IndicatorConfig, IndicatorKind
from apex_core.models.series import IndicatorOutput

logger = logging.getLogger(__name__)

IndicatorFunc = Callable[[Sequence[Bar], IndicatorConfig, int | None], IndicatorOutput]

# Global registry: indicator kind -> computation
_REGISTRY: dict[IndicatorKind, IndicatorFunc] = {}


def register_indicator(kind: IndicatorKind):
    """Decorator to register the computation for an indicator kind.

    Raises:
        ValueError: If the kind already has a computation registered.
    """

    def decorator(func: IndicatorFunc) -> IndicatorFunc:
        if kind in _REGISTRY:
            raise ValueError(
                f"Indicator '{kind.value}' is already registered by {_REGISTRY[kind].__name__}"
            )
        _REGISTRY[kind] = func
        logger.debug("Registered indicator: %s -> %s", kind.value, func.__name__)
        return func

    return decorator


def get_indicator(kind: IndicatorKind) -> IndicatorFunc:
    """Get the computation registered for ``kind``.

    Raises:
        KeyError: If nothing is registered for the kind.
    """
    func = _REGISTRY.get(kind)
    if func is None:
        available = ", ".join(sorted(k.value for k in _REGISTRY)) or "(none)"
        raise KeyError(f"Unknown indicator '{kind}'. Available: {available}")
    return func


def list_indicators() -> list[str]:
    """Return a sorted list of registered indicator kinds."""
    return sorted(k.value for k in _REGISTRY)


def compute_indicator(
    bars: Sequence[Bar],
    config: IndicatorConfig,
    anchor_ms: int | None = None,
) -> IndicatorOutput:
    """Compute the indicator described by ``config`` over ``bars``.

    The result still carries placeholder timestamps; use
    ``apex_core.alignment.align_output`` to map it onto the bars' axis.
    """
    return get_indicator(config.kind)(bars, config, anchor_ms)
