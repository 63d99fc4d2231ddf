"""Tests for price alerts."""

import pytest
from pydantic import ValidationError

from apex_app.services.alerts import AlertBook, AlertCondition


class TestAlertBook:
    """Tests for alert management."""

    def test_create_and_get(self):
        book = AlertBook()
        alert_id = book.create_alert("AAPL", "above", 200.0, message="AAPL breakout")

        alerts = book.get_alerts()
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.id == alert_id
        assert alert.condition == AlertCondition.ABOVE
        assert alert.is_active is True
        assert alert.triggered is False
        assert book.get_alert(alert_id) == alert

    def test_unique_ids(self):
        book = AlertBook()
        first = book.create_alert("AAPL", "above", 200.0)
        second = book.create_alert("AAPL", "above", 200.0)
        assert first != second

    def test_unknown_condition_raises(self):
        with pytest.raises(ValueError):
            AlertBook().create_alert("AAPL", "sideways", 200.0)

    def test_delete(self):
        book = AlertBook()
        alert_id = book.create_alert("AAPL", "above", 200.0)

        assert book.delete_alert(alert_id) is True
        assert book.get_alerts() == []
        assert book.delete_alert(alert_id) is False

    def test_toggle(self):
        book = AlertBook()
        alert_id = book.create_alert("AAPL", "above", 200.0)

        assert book.toggle_alert(alert_id).is_active is False
        assert book.toggle_alert(alert_id).is_active is True
        assert book.toggle_alert("missing") is None

    def test_alerts_are_frozen(self):
        book = AlertBook()
        book.create_alert("AAPL", "above", 200.0)
        with pytest.raises(ValidationError):
            book.get_alerts()[0].triggered = True


class TestCheckAlert:
    """Tests for triggering alerts."""

    def test_above_triggers_once(self):
        book = AlertBook()
        alert_id = book.create_alert("AAPL", "above", 200.0)

        assert book.check_alert("AAPL", 199.0) == []
        triggered = book.check_alert("AAPL", 201.0)
        assert [a.id for a in triggered] == [alert_id]
        assert triggered[0].current_value == 201.0
        assert book.get_alert(alert_id).triggered is True

        assert book.check_alert("AAPL", 205.0) == []

    def test_above_is_strict(self):
        book = AlertBook()
        book.create_alert("AAPL", "above", 200.0)
        assert book.check_alert("AAPL", 200.0) == []

    def test_below(self):
        book = AlertBook()
        book.create_alert("TSLA", AlertCondition.BELOW, 150.0)

        assert book.check_alert("TSLA", 151.0) == []
        assert len(book.check_alert("TSLA", 149.0)) == 1

    def test_other_symbol_ignored(self):
        book = AlertBook()
        book.create_alert("AAPL", "above", 200.0)
        assert book.check_alert("MSFT", 500.0) == []

    def test_inactive_ignored(self):
        book = AlertBook()
        alert_id = book.create_alert("AAPL", "above", 200.0, is_active=False)

        assert book.check_alert("AAPL", 250.0) == []
        book.toggle_alert(alert_id)
        assert len(book.check_alert("AAPL", 250.0)) == 1


class TestSubscribe:
    """Tests for alert listeners."""

    def test_immediate_snapshot(self):
        book = AlertBook()
        book.create_alert("AAPL", "above", 200.0)
        seen = []

        book.subscribe(seen.append)

        assert len(seen) == 1
        assert len(seen[0]) == 1

    def test_notified_on_changes(self):
        book = AlertBook()
        seen = []
        book.subscribe(seen.append)

        alert_id = book.create_alert("AAPL", "above", 200.0)
        book.toggle_alert(alert_id)
        book.toggle_alert(alert_id)
        book.check_alert("AAPL", 201.0)
        book.delete_alert(alert_id)

        # Initial snapshot + create, 2 toggles, trigger, delete
        assert len(seen) == 6
        assert seen[4][0].triggered is True
        assert seen[-1] == []

    def test_no_notification_without_trigger(self):
        book = AlertBook()
        book.create_alert("AAPL", "above", 200.0)
        seen = []
        book.subscribe(seen.append)

        book.check_alert("AAPL", 100.0)
        assert len(seen) == 1

    def test_unsubscribe(self):
        book = AlertBook()
        seen = []
        unsubscribe = book.subscribe(seen.append)
        unsubscribe()

        book.create_alert("AAPL", "above", 200.0)
        assert len(seen) == 1

    def test_failing_listener_does_not_stop_others(self):
        book = AlertBook()
        calls = []

        def broken(alerts):
            if calls:
                raise RuntimeError("listener failed")
            calls.append(alerts)

        seen = []
        book.subscribe(broken)
        book.subscribe(seen.append)

        book.create_alert("AAPL", "above", 200.0)
        assert len(seen) == 2
