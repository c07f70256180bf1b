from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase

ALERT_TYPES = (
    "Temperature",
    "Motion",
    "Health",
    "Device",
    "System",
    "Battery",
    "Signal",
    "Maintenance",
    "Security",
    "Other",
)
ALERT_SEVERITIES = ("Low", "Medium", "High", "Critical")
ALERT_STATUSES = ("Active", "Acknowledged", "Resolved", "Dismissed", "Escalated")
ACTION_TYPES = ("Notification", "Email", "SMS", "System Action", "Manual Intervention", "Escalation")

_ALERT_ID_ALPHABET = string.ascii_uppercase + string.digits


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: object) -> datetime | None:
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        # SQLite hands back naive values; everything is stored in UTC.
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_alert_id() -> str:
    suffix = "".join(secrets.choice(_ALERT_ID_ALPHABET) for _ in range(6))
    return f"ALERT-{int(time.time() * 1000)}-{suffix}"


class Base(DeclarativeBase):
    pass


class SensorReading(Base):
    __tablename__ = "sensor_readings"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    cow_id = Column(String(50), nullable=False, index=True)
    temperature = Column(Float, nullable=True)
    motion_change = Column(Float, nullable=True)
    pitch = Column(Float, nullable=True)
    roll = Column(Float, nullable=True)
    humidity = Column(Float, nullable=True)

    device_id = Column(String(100), nullable=True, index=True)
    battery_level = Column(Float, nullable=True)

    disease = Column(String(64), nullable=False, default="Normal", index=True)
    health_score = Column(Float, nullable=False, default=100.0)
    risk_level = Column(String(16), nullable=False, default="Low", index=True)
    data_quality = Column(JSON, nullable=False, default=dict)


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True)
    alert_id = Column(String(50), unique=True, nullable=False, default=new_alert_id, index=True)

    type = Column(String(32), nullable=False)
    severity = Column(String(16), nullable=False, default="Medium")
    status = Column(String(16), nullable=False, default="Active", index=True)

    cow_id = Column(String(50), nullable=True, index=True)
    device_id = Column(String(100), nullable=True, index=True)
    farm_id = Column(String(50), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    message = Column(String(500), nullable=False)

    # Mirrors data["customData"]["disease"] so the duplicate lookup stays portable across dialects.
    disease = Column(String(64), nullable=True, index=True)
    data = Column(JSON, nullable=False, default=dict)
    actions = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    priority = Column(Integer, nullable=False, default=5)

    acknowledged_by = Column(String(100), nullable=True)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    acknowledgment_note = Column(String(500), nullable=True)

    resolved_by = Column(String(100), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolution_note = Column(String(1000), nullable=True)
    resolution_time = Column(Integer, nullable=True)  # minutes

    is_escalated = Column(Boolean, nullable=False, default=False)
    escalated_at = Column(DateTime(timezone=True), nullable=True)
    escalated_to = Column(String(100), nullable=True)
    escalation_reason = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
