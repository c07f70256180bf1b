from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cowbelt.db.models import ALERT_SEVERITIES, ALERT_TYPES, Alert, SensorReading


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ReadingIn(CamelModel):
    cow_id: str = Field(..., min_length=1, max_length=50)
    temperature: float | None = Field(None, allow_inf_nan=False, description="Body temperature in °C")
    motion_change: float | None = Field(
        None, ge=0, allow_inf_nan=False, description="Accelerometer-derived motion magnitude"
    )
    pitch: float | None = Field(None, allow_inf_nan=False)
    roll: float | None = Field(None, allow_inf_nan=False)
    humidity: float | None = Field(None, ge=0, le=100)
    device_id: str | None = Field(None, max_length=100)
    battery_level: float | None = Field(None, ge=0, le=100)


class AnomalyOut(CamelModel):
    type: str
    severity: str
    message: str
    value: float | None = None
    values: dict[str, float] | None = None


class InsightOut(CamelModel):
    category: str
    insight: str
    recommendation: str
    priority: str


class StoreError(CamelModel):
    stage: str
    error: str


class IngestResponse(CamelModel):
    message: str
    disease: str
    confidence: float
    risk_level: str
    algorithm: str
    reason: str | None = None
    anomalies: list[AnomalyOut]
    insights: list[InsightOut]
    reading_id: int | None = None
    alerts: list[str] = []
    errors: list[StoreError] = []


class ReadingOut(CamelModel):
    id: int
    cow_id: str
    timestamp: datetime
    temperature: float | None
    motion_change: float | None
    pitch: float | None
    roll: float | None
    humidity: float | None
    device_id: str | None
    battery_level: float | None
    disease: str
    health_score: float
    risk_level: str
    data_quality: dict[str, Any]

    @classmethod
    def from_reading(cls, r: SensorReading) -> "ReadingOut":
        return cls.model_validate(r)


class AlertSource(CamelModel):
    cow_id: str | None = None
    device_id: str | None = None
    farm_id: str | None = None


class Acknowledgment(CamelModel):
    is_acknowledged: bool = False
    acknowledged_by: str | None = None
    acknowledged_at: datetime | None = None
    acknowledgment_note: str | None = None


class Resolution(CamelModel):
    is_resolved: bool = False
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    resolution_note: str | None = None
    resolution_time: int | None = None


class Escalation(CamelModel):
    is_escalated: bool = False
    escalated_at: datetime | None = None
    escalated_to: str | None = None
    escalation_reason: str | None = None


class AlertOut(CamelModel):
    alert_id: str
    type: str
    severity: str
    status: str
    source: AlertSource
    title: str
    description: str
    message: str
    data: dict[str, Any]
    actions: list[dict[str, Any]]
    tags: list[str]
    priority: int
    acknowledgment: Acknowledgment
    resolution: Resolution
    escalation: Escalation
    created_at: datetime
    updated_at: datetime
    expires_at: datetime | None = None

    @classmethod
    def from_alert(cls, a: Alert) -> "AlertOut":
        return cls(
            alert_id=a.alert_id,
            type=a.type,
            severity=a.severity,
            status=a.status,
            source=AlertSource(cow_id=a.cow_id, device_id=a.device_id, farm_id=a.farm_id),
            title=a.title,
            description=a.description,
            message=a.message,
            data=a.data or {},
            actions=list(a.actions or []),
            tags=list(a.tags or []),
            priority=a.priority,
            acknowledgment=Acknowledgment(
                is_acknowledged=a.acknowledged_at is not None,
                acknowledged_by=a.acknowledged_by,
                acknowledged_at=a.acknowledged_at,
                acknowledgment_note=a.acknowledgment_note,
            ),
            resolution=Resolution(
                is_resolved=a.resolved_at is not None,
                resolved_by=a.resolved_by,
                resolved_at=a.resolved_at,
                resolution_note=a.resolution_note,
                resolution_time=a.resolution_time,
            ),
            escalation=Escalation(
                is_escalated=bool(a.is_escalated),
                escalated_at=a.escalated_at,
                escalated_to=a.escalated_to,
                escalation_reason=a.escalation_reason,
            ),
            created_at=a.created_at,
            updated_at=a.updated_at,
            expires_at=a.expires_at,
        )


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_records: int
    has_next: bool
    has_prev: bool


class AlertPage(CamelModel):
    alerts: list[AlertOut]
    pagination: Pagination


class AcknowledgeRequest(CamelModel):
    acknowledged_by: str = Field(..., min_length=1, max_length=100)
    acknowledgment_note: str | None = Field(None, max_length=500)


class ResolveRequest(CamelModel):
    resolved_by: str = Field(..., min_length=1, max_length=100)
    resolution_note: str | None = Field(None, max_length=1000)


class EscalateRequest(CamelModel):
    escalated_to: str = Field(..., min_length=1, max_length=100)
    escalation_reason: str = Field(..., min_length=1, max_length=500)


class ActionRequest(CamelModel):
    action_type: str
    performed_by: str | None = Field(None, max_length=100)
    result: str | None = Field(None, max_length=500)
    success: bool = True


class AlertCreateRequest(CamelModel):
    type: str
    severity: str
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=1000)
    cow_id: str | None = Field(None, max_length=50)
    device_id: str | None = Field(None, max_length=100)
    farm_id: str | None = Field(None, max_length=50)
    data: dict[str, Any] = Field(default_factory=dict)
    priority: int = Field(5, ge=1, le=10)
    tags: list[str] = Field(default_factory=list)

    @field_validator("type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        if v not in ALERT_TYPES:
            raise ValueError(f"type must be one of {', '.join(ALERT_TYPES)}")
        return v

    @field_validator("severity")
    @classmethod
    def _known_severity(cls, v: str) -> str:
        if v not in ALERT_SEVERITIES:
            raise ValueError(f"severity must be one of {', '.join(ALERT_SEVERITIES)}")
        return v


class ReadingPage(CamelModel):
    data: list[ReadingOut]
    pagination: Pagination


class ReadingRange(CamelModel):
    data: list[ReadingOut]
    count: int
    date_range: dict[str, datetime]
    cow_id: str
