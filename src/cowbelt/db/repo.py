from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cowbelt.db.models import Alert, SensorReading, new_alert_id, utcnow


async def insert_reading(
    session: AsyncSession,
    *,
    cow_id: str,
    temperature: float | None,
    motion_change: float | None,
    pitch: float | None,
    roll: float | None,
    humidity: float | None,
    device_id: str | None,
    battery_level: float | None,
    disease: str,
    health_score: float,
    risk_level: str,
    data_quality: dict,
) -> SensorReading:
    reading = SensorReading(
        cow_id=cow_id,
        temperature=temperature,
        motion_change=motion_change,
        pitch=pitch,
        roll=roll,
        humidity=humidity,
        device_id=device_id,
        battery_level=battery_level,
        disease=disease,
        health_score=float(health_score),
        risk_level=risk_level,
        data_quality=data_quality,
    )
    session.add(reading)
    await session.commit()
    return reading


async def latest_readings(session: AsyncSession, *, limit: int = 10) -> list[SensorReading]:
    stmt = select(SensorReading).order_by(SensorReading.timestamp.desc(), SensorReading.id.desc()).limit(limit)
    return list((await session.scalars(stmt)).all())


async def readings_for_cow(
    session: AsyncSession, *, cow_id: str, limit: int = 50, offset: int = 0
) -> list[SensorReading]:
    stmt = (
        select(SensorReading)
        .where(SensorReading.cow_id == cow_id)
        .order_by(SensorReading.timestamp.desc(), SensorReading.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list((await session.scalars(stmt)).all())


async def latest_reading_for_cow(session: AsyncSession, *, cow_id: str) -> SensorReading | None:
    rows = await readings_for_cow(session, cow_id=cow_id, limit=1)
    return rows[0] if rows else None


async def latest_complete_reading_for_cow(session: AsyncSession, *, cow_id: str) -> SensorReading | None:
    stmt = (
        select(SensorReading)
        .where(
            SensorReading.cow_id == cow_id,
            SensorReading.temperature.is_not(None),
            SensorReading.motion_change.is_not(None),
        )
        .order_by(SensorReading.timestamp.desc(), SensorReading.id.desc())
        .limit(1)
    )
    return (await session.scalars(stmt)).first()


async def list_readings(session: AsyncSession, *, limit: int = 20, page: int = 1) -> tuple[list[SensorReading], int]:
    total = int(await session.scalar(select(func.count()).select_from(SensorReading)) or 0)
    stmt = (
        select(SensorReading)
        .order_by(SensorReading.timestamp.desc(), SensorReading.id.desc())
        .offset((max(page, 1) - 1) * limit)
        .limit(limit)
    )
    return list((await session.scalars(stmt)).all()), total


async def readings_since(session: AsyncSession, *, since: datetime) -> list[SensorReading]:
    stmt = select(SensorReading).where(SensorReading.timestamp >= since).order_by(SensorReading.timestamp.desc())
    return list((await session.scalars(stmt)).all())


async def readings_between(
    session: AsyncSession, *, start: datetime, end: datetime, cow_id: str | None = None
) -> list[SensorReading]:
    filters = [SensorReading.timestamp >= start, SensorReading.timestamp <= end]
    if cow_id:
        filters.append(SensorReading.cow_id == cow_id)
    stmt = select(SensorReading).where(*filters).order_by(SensorReading.timestamp.desc(), SensorReading.id.desc())
    return list((await session.scalars(stmt)).all())


async def delete_readings_before(session: AsyncSession, *, cutoff: datetime) -> int:
    result = await session.execute(delete(SensorReading).where(SensorReading.timestamp < cutoff))
    await session.commit()
    return int(result.rowcount or 0)


async def insert_alert(
    session: AsyncSession,
    *,
    alert_type: str,
    severity: str,
    title: str,
    description: str,
    message: str,
    cow_id: str | None = None,
    device_id: str | None = None,
    farm_id: str | None = None,
    data: dict[str, Any] | None = None,
    priority: int = 5,
    tags: list[str] | None = None,
    low_severity_ttl_days: int | None = None,
) -> Alert:
    data = data or {}
    custom = data.get("customData") or {}
    now = utcnow()
    alert = Alert(
        alert_id=new_alert_id(),
        type=alert_type,
        severity=severity,
        status="Active",
        cow_id=cow_id,
        device_id=device_id,
        farm_id=farm_id,
        title=title,
        description=description,
        message=message,
        disease=custom.get("disease"),
        data=data,
        actions=[],
        tags=list(tags or []),
        priority=priority,
        created_at=now,
        updated_at=now,
    )
    if severity == "Low" and low_severity_ttl_days:
        alert.expires_at = now + timedelta(days=low_severity_ttl_days)

    session.add(alert)
    await session.commit()
    return alert


async def find_latest_alert_for_subject_and_disease(
    session: AsyncSession, *, cow_id: str, disease: str
) -> Alert | None:
    stmt = (
        select(Alert)
        .where(Alert.cow_id == cow_id, Alert.disease == disease)
        .order_by(Alert.created_at.desc(), Alert.id.desc())
        .limit(1)
    )
    return (await session.scalars(stmt)).first()


async def get_alert(session: AsyncSession, *, alert_id: str) -> Alert | None:
    stmt = select(Alert).where(Alert.alert_id == alert_id)
    return (await session.scalars(stmt)).first()


async def list_alerts(
    session: AsyncSession,
    *,
    status: str | None = None,
    severity: str | None = None,
    alert_type: str | None = None,
    cow_id: str | None = None,
    farm_id: str | None = None,
    limit: int = 50,
    page: int = 1,
) -> tuple[list[Alert], int]:
    filters = []
    if status:
        filters.append(Alert.status == status)
    if severity:
        filters.append(Alert.severity == severity)
    if alert_type:
        filters.append(Alert.type == alert_type)
    if cow_id:
        filters.append(Alert.cow_id == cow_id)
    if farm_id:
        filters.append(Alert.farm_id == farm_id)

    total = int(await session.scalar(select(func.count()).select_from(Alert).where(*filters)) or 0)
    stmt = (
        select(Alert)
        .where(*filters)
        .order_by(Alert.created_at.desc(), Alert.id.desc())
        .offset((max(page, 1) - 1) * limit)
        .limit(limit)
    )
    return list((await session.scalars(stmt)).all()), total


async def active_alerts(session: AsyncSession, *, limit: int = 20) -> list[Alert]:
    stmt = (
        select(Alert)
        .where(Alert.status == "Active")
        .order_by(Alert.priority.desc(), Alert.created_at.desc(), Alert.id.desc())
        .limit(limit)
    )
    return list((await session.scalars(stmt)).all())


async def critical_alerts(session: AsyncSession) -> list[Alert]:
    stmt = (
        select(Alert)
        .where(Alert.severity == "Critical", Alert.status != "Resolved")
        .order_by(Alert.created_at.desc(), Alert.id.desc())
    )
    return list((await session.scalars(stmt)).all())


async def alerts_since(session: AsyncSession, *, since: datetime) -> list[Alert]:
    stmt = select(Alert).where(Alert.created_at >= since)
    return list((await session.scalars(stmt)).all())


async def delete_resolved_alerts_before(session: AsyncSession, *, cutoff: datetime) -> int:
    result = await session.execute(delete(Alert).where(Alert.created_at < cutoff, Alert.status == "Resolved"))
    await session.commit()
    return int(result.rowcount or 0)
