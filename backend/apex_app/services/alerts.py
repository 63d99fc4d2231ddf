"""Price alerts.

AlertBook is owned by whoever creates it (typically main) and passed to the
components that check prices against it.
"""

import logging
import time
from enum import Enum
from typing import Callable
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class AlertCondition(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class Alert(BaseModel):
    """A price alert. Triggers at most once."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    condition: AlertCondition
    value: float
    message: str = ""
    is_active: bool = True
    triggered: bool = False
    current_value: float | None = None
    created_at: int  # Unix epoch in milliseconds

    def is_met(self, current_value: float) -> bool:
        if self.condition == AlertCondition.ABOVE:
            return current_value > self.value
        return current_value < self.value


AlertListener = Callable[[list[Alert]], None]


class AlertBook:
    """In-memory collection of alerts with change listeners."""

    def __init__(self):
        self._alerts: dict[str, Alert] = {}
        self._listeners: list[AlertListener] = []

    def create_alert(
        self,
        symbol: str,
        condition: AlertCondition | str,
        value: float,
        message: str = "",
        is_active: bool = True,
    ) -> str:
        """Create an alert and return its id."""
        alert = Alert(
            id=str(uuid4()),
            symbol=symbol,
            condition=AlertCondition(condition),
            value=value,
            message=message,
            is_active=is_active,
            created_at=int(time.time() * 1000),
        )
        self._alerts[alert.id] = alert
        logger.info(f"Alert created for {symbol}: {alert.condition.value} {value}")
        self._notify()
        return alert.id

    def get_alerts(self) -> list[Alert]:
        """All alerts, in creation order."""
        return list(self._alerts.values())

    def get_alert(self, alert_id: str) -> Alert | None:
        return self._alerts.get(alert_id)

    def delete_alert(self, alert_id: str) -> bool:
        """Delete an alert. Returns False if it did not exist."""
        if self._alerts.pop(alert_id, None) is None:
            return False
        self._notify()
        return True

    def toggle_alert(self, alert_id: str) -> Alert | None:
        """Flip an alert's active flag. Returns the updated alert."""
        alert = self._alerts.get(alert_id)
        if alert is None:
            return None
        alert = alert.model_copy(update={"is_active": not alert.is_active})
        self._alerts[alert_id] = alert
        self._notify()
        return alert

    def check_alert(self, symbol: str, current_value: float) -> list[Alert]:
        """
        Check a symbol's current value against its active alerts.

        Returns the alerts triggered by this call. A triggered alert never
        triggers again.
        """
        triggered = []
        for alert_id, alert in self._alerts.items():
            if alert.symbol != symbol or not alert.is_active or alert.triggered:
                continue
            if alert.is_met(current_value):
                alert = alert.model_copy(
                    update={"triggered": True, "current_value": current_value}
                )
                self._alerts[alert_id] = alert
                triggered.append(alert)
                logger.warning(f"Alert {symbol}: {alert.message or alert.condition.value} {alert.value}")

        if triggered:
            self._notify()
        return triggered

    def subscribe(self, listener: AlertListener) -> Callable[[], None]:
        """Register a listener; it receives the alert list now and after each change.

        Returns a function that unsubscribes the listener.
        """
        self._listeners.append(listener)
        listener(self.get_alerts())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        alerts = self.get_alerts()
        for listener in list(self._listeners):
            try:
                listener(alerts)
            except Exception as e:
                logger.error(f"Alert listener error: {e}")
