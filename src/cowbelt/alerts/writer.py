from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cowbelt.alerts.events import AlertCreated, AlertEventSink
from cowbelt.analytics.anomalies import Anomaly
from cowbelt.classifiers.predictor import HealthClassification
from cowbelt.classifiers.reference import CRITICAL, HIGH
from cowbelt.db.models import Alert
from cowbelt.db.repo import find_latest_alert_for_subject_and_disease, insert_alert

logger = logging.getLogger(__name__)

ALERTING_RISK_LEVELS = (HIGH, CRITICAL)
DEDUP_FIELDS = ("severity", "title", "description", "message")


def health_alert_fields(cow_id: str, disease: str, risk_level: str) -> dict[str, str]:
    """Templated values a health alert for this event would carry."""
    text = f"Health issue detected: {disease}"
    return {
        "severity": CRITICAL if risk_level == CRITICAL else HIGH,
        "title": f"Health Alert - Cow {cow_id}",
        "description": text,
        "message": text,
    }


def anomaly_alert_type(anomaly_type: str) -> str:
    return "Temperature" if "temperature" in anomaly_type.lower() else "Motion"


def is_duplicate(existing: Alert | None, fields: dict[str, str]) -> bool:
    if existing is None:
        return False
    return all(getattr(existing, name) == fields[name] for name in DEDUP_FIELDS)


class AlertWriter:
    """Turns classification and anomaly output into persisted alerts.

    Health alerts are checked against the latest alert for the same cow and
    disease before writing. The check and the insert are two separate
    statements, so two concurrent readings for one cow can both pass the check
    and write one duplicate; sequential traffic never does. Anomaly alerts are
    written unconditionally.
    """

    def __init__(self, *, events: AlertEventSink | None = None, low_severity_ttl_days: int | None = None) -> None:
        self._events = events
        self._low_severity_ttl_days = low_severity_ttl_days

    async def write_health_alert(
        self,
        session: AsyncSession,
        *,
        cow_id: str,
        classification: HealthClassification,
        temperature: float | None,
        motion_change: float | None,
    ) -> Alert | None:
        if classification.risk_level not in ALERTING_RISK_LEVELS:
            return None

        fields = health_alert_fields(cow_id, classification.disease, classification.risk_level)
        latest = await find_latest_alert_for_subject_and_disease(
            session, cow_id=cow_id, disease=classification.disease
        )
        if is_duplicate(latest, fields):
            logger.debug("Duplicate health alert for cow %s (%s) skipped", cow_id, classification.disease)
            return None

        alert = await insert_alert(
            session,
            alert_type="Health",
            cow_id=cow_id,
            data={
                "temperature": temperature,
                "motionChange": motion_change,
                "healthScore": classification.confidence * 100,
                "customData": {"disease": classification.disease, "confidence": classification.confidence},
            },
            low_severity_ttl_days=self._low_severity_ttl_days,
            **fields,
        )
        self._created(alert)
        return alert

    async def write_anomaly_alerts(
        self,
        session: AsyncSession,
        *,
        cow_id: str,
        anomalies: Iterable[Anomaly],
        temperature: float | None,
        motion_change: float | None,
    ) -> list[Alert]:
        created: list[Alert] = []
        for anomaly in anomalies:
            if not anomaly.is_alertable:
                continue
            alert = await insert_alert(
                session,
                alert_type=anomaly_alert_type(anomaly.type),
                severity=CRITICAL if anomaly.severity == "critical" else HIGH,
                cow_id=cow_id,
                title=f"Anomaly Alert - Cow {cow_id}",
                description=anomaly.message,
                message=anomaly.message,
                data={
                    "temperature": temperature,
                    "motionChange": motion_change,
                    "customData": {
                        "anomalyType": anomaly.type,
                        "value": anomaly.value if anomaly.values is None else dict(anomaly.values),
                    },
                },
                low_severity_ttl_days=self._low_severity_ttl_days,
            )
            self._created(alert)
            created.append(alert)
        return created

    async def write_manual_alert(
        self,
        session: AsyncSession,
        *,
        alert_type: str,
        severity: str,
        title: str,
        message: str,
        description: str | None = None,
        cow_id: str | None = None,
        device_id: str | None = None,
        farm_id: str | None = None,
        data: dict[str, Any] | None = None,
        priority: int = 5,
        tags: list[str] | None = None,
    ) -> Alert:
        """Operator or device raised alert; never deduplicated."""
        alert = await insert_alert(
            session,
            alert_type=alert_type,
            severity=severity,
            title=title,
            description=description or message,
            message=message,
            cow_id=cow_id,
            device_id=device_id,
            farm_id=farm_id,
            data=data,
            priority=priority,
            tags=tags,
            low_severity_ttl_days=self._low_severity_ttl_days,
        )
        self._created(alert)
        return alert

    def _created(self, alert: Alert) -> None:
        logger.info("Alert created: %s - %s", alert.alert_id, alert.title)
        if self._events is None:
            return
        self._events.publish(
            AlertCreated(
                alert_id=alert.alert_id,
                type=alert.type,
                severity=alert.severity,
                cow_id=alert.cow_id,
                title=alert.title,
                message=alert.message,
                created_at=alert.created_at,
            )
        )
