"""Named indicator layouts offered by the chart."""

from apex_core.models.config import IndicatorConfig, IndicatorKind

DEFAULT_LAYOUT: tuple[IndicatorConfig, ...] = (
    IndicatorConfig(kind=IndicatorKind.SMA, period=50),
    IndicatorConfig(kind=IndicatorKind.EMA, period=20),
)

PRESETS: dict[str, tuple[IndicatorConfig, ...]] = {
    "MACD + RSI": (
        IndicatorConfig(kind=IndicatorKind.MACD, fast_period=12, slow_period=26, signal_period=9),
        IndicatorConfig(kind=IndicatorKind.RSI, period=14),
    ),
    "BB + SMA50": (
        IndicatorConfig(kind=IndicatorKind.BB, period=20, std_dev=2.0),
        IndicatorConfig(kind=IndicatorKind.SMA, period=50),
    ),
    "Golden Cross": (
        IndicatorConfig(kind=IndicatorKind.SMA, period=50),
        IndicatorConfig(kind=IndicatorKind.SMA, period=200),
    ),
}


def get_preset(name: str) -> tuple[IndicatorConfig, ...]:
    """Get a preset layout by name.

    Raises:
        KeyError: If no preset has that name.
    """
    preset = PRESETS.get(name)
    if preset is None:
        available = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown preset '{name}'. Available: {available}")
    return preset
