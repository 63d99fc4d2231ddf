"""Application services."""

from apex_app.services.alerts import Alert, AlertBook, AlertCondition
from apex_app.services.live_chart import ChartUpdate, LiveChart

__all__ = [
    "Alert",
    "AlertBook",
    "AlertCondition",
    "ChartUpdate",
    "LiveChart",
]
