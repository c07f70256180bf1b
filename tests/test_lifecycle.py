from datetime import datetime, timedelta, timezone

import pytest

from cowbelt.alerts import lifecycle
from cowbelt.alerts.lifecycle import AlertTransitionError, resolution_minutes
from cowbelt.db.models import Alert

T0 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def _alert(status: str = "Active", created_at=T0) -> Alert:
    return Alert(alert_id="ALERT-1-ABCDEF", type="Health", severity="High", status=status, created_at=created_at, actions=[])


def test_acknowledge_then_resolve() -> None:
    alert = _alert()
    lifecycle.acknowledge(alert, "vet-1", "on my way", now=T0 + timedelta(minutes=5))
    assert alert.status == "Acknowledged"
    assert alert.acknowledged_by == "vet-1"
    assert alert.acknowledgment_note == "on my way"

    lifecycle.resolve(alert, "vet-1", "treated", now=T0 + timedelta(minutes=90, seconds=30))
    assert alert.status == "Resolved"
    assert alert.resolution_time == 91
    assert alert.resolution_note == "treated"


def test_resolution_time_handles_naive_and_missing_timestamps() -> None:
    naive = T0.replace(tzinfo=None)
    assert resolution_minutes(naive, T0 + timedelta(minutes=10)) == 10
    assert resolution_minutes(None, T0) is None
    assert resolution_minutes("yesterday", T0) is None

    alert = _alert(created_at=None)
    lifecycle.resolve(alert, "vet-1", now=T0)
    assert alert.status == "Resolved"
    assert alert.resolution_time is None


def test_illegal_transitions() -> None:
    with pytest.raises(AlertTransitionError):
        lifecycle.acknowledge(_alert("Resolved"), "vet-1")
    with pytest.raises(AlertTransitionError):
        lifecycle.resolve(_alert("Resolved"), "vet-1")
    with pytest.raises(AlertTransitionError):
        lifecycle.escalate(_alert("Escalated"), "manager", "no response")
    with pytest.raises(AlertTransitionError):
        lifecycle.acknowledge(_alert("Dismissed"), "vet-1")


def test_actor_is_required() -> None:
    with pytest.raises(ValueError):
        lifecycle.acknowledge(_alert(), "  ")
    with pytest.raises(ValueError):
        lifecycle.escalate(_alert(), "manager", "")


def test_escalate_then_resolve() -> None:
    alert = _alert("Acknowledged")
    lifecycle.escalate(alert, "farm-manager", "no improvement", now=T0)
    assert alert.status == "Escalated"
    assert alert.is_escalated is True
    assert alert.escalated_to == "farm-manager"

    lifecycle.resolve(alert, "farm-manager", now=T0 + timedelta(hours=2))
    assert alert.resolution_time == 120


def test_add_action_appends_without_changing_status() -> None:
    alert = _alert("Resolved")
    before = alert.actions
    lifecycle.add_action(alert, "SMS", "system", "delivered", now=T0)
    lifecycle.add_action(alert, "Email", None, None, success=False, now=T0)

    assert alert.status == "Resolved"
    assert before == []
    assert [a["actionType"] for a in alert.actions] == ["SMS", "Email"]
    assert alert.actions[1]["performedBy"] == "System"
    assert alert.actions[1]["success"] is False

    with pytest.raises(ValueError):
        lifecycle.add_action(alert, "Carrier Pigeon")
