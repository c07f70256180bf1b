"""Alert status transitions.

    Active -> Acknowledged -> Resolved
    Active / Acknowledged -> Escalated -> Resolved

``Dismissed`` is terminal and only set outside this module. Nothing moves an
alert back to ``Active``; a recurrence is always a new alert. Logged actions
can be attached in any status.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from cowbelt.db.models import ACTION_TYPES, Alert, as_utc, utcnow

logger = logging.getLogger(__name__)

ACKNOWLEDGE_FROM = frozenset({"Active"})
RESOLVE_FROM = frozenset({"Active", "Acknowledged", "Escalated"})
ESCALATE_FROM = frozenset({"Active", "Acknowledged"})


class AlertTransitionError(ValueError):
    pass


def _require(value: str | None, name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{name} is required")
    return str(value).strip()


def _check_transition(alert: Alert, allowed: frozenset[str], action: str) -> None:
    if alert.status not in allowed:
        raise AlertTransitionError(f"Cannot {action} alert {alert.alert_id} in status {alert.status}")


def resolution_minutes(created_at: object, resolved_at: object) -> int | None:
    start = as_utc(created_at)
    end = as_utc(resolved_at)
    if start is None or end is None:
        return None
    minutes = (end - start).total_seconds() / 60
    return int(math.floor(minutes + 0.5))


def acknowledge(alert: Alert, acknowledged_by: str, note: str | None = None, *, now: datetime | None = None) -> Alert:
    actor = _require(acknowledged_by, "acknowledgedBy")
    _check_transition(alert, ACKNOWLEDGE_FROM, "acknowledge")

    alert.acknowledged_by = actor
    alert.acknowledged_at = now or utcnow()
    alert.acknowledgment_note = note
    alert.status = "Acknowledged"
    logger.info("Alert acknowledged: %s by %s", alert.alert_id, actor)
    return alert


def resolve(alert: Alert, resolved_by: str, note: str | None = None, *, now: datetime | None = None) -> Alert:
    actor = _require(resolved_by, "resolvedBy")
    _check_transition(alert, RESOLVE_FROM, "resolve")

    alert.resolved_by = actor
    alert.resolved_at = now or utcnow()
    alert.resolution_note = note
    alert.resolution_time = resolution_minutes(alert.created_at, alert.resolved_at)
    alert.status = "Resolved"
    logger.info("Alert resolved: %s by %s", alert.alert_id, actor)
    return alert


def escalate(alert: Alert, escalated_to: str, reason: str, *, now: datetime | None = None) -> Alert:
    target = _require(escalated_to, "escalatedTo")
    why = _require(reason, "escalationReason")
    _check_transition(alert, ESCALATE_FROM, "escalate")

    alert.is_escalated = True
    alert.escalated_at = now or utcnow()
    alert.escalated_to = target
    alert.escalation_reason = why
    alert.status = "Escalated"
    logger.info("Alert escalated: %s to %s", alert.alert_id, target)
    return alert


def add_action(
    alert: Alert,
    action_type: str,
    performed_by: str | None = None,
    result: str | None = None,
    success: bool = True,
    *,
    now: datetime | None = None,
) -> Alert:
    if action_type not in ACTION_TYPES:
        raise ValueError(f"Unknown action type: {action_type}")

    entry = {
        "actionType": action_type,
        "performedBy": (performed_by or "System").strip() or "System",
        "performedAt": (now or utcnow()).isoformat(),
        "result": result,
        "success": bool(success),
    }
    # Reassign so the JSON column registers the change.
    alert.actions = [*(alert.actions or []), entry]
    return alert
