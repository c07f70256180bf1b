from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from cachetools import TTLCache
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cowbelt.alerts import lifecycle
from cowbelt.alerts.events import AlertEventSink, log_notifier
from cowbelt.alerts.writer import AlertWriter
from cowbelt.analytics.anomalies import detect_anomalies
from cowbelt.analytics.health import analyze_health
from cowbelt.analytics.insights import generate_health_insights, max_priority
from cowbelt.analytics.statistics import summarize_alerts, summarize_readings
from cowbelt.api.schemas import AlertCreateRequest, ReadingIn
from cowbelt.classifiers.predictor import HealthClassification, classify, is_number
from cowbelt.config import settings
from cowbelt.db import repo
from cowbelt.db.models import Alert, Base, SensorReading, as_utc, utcnow
from cowbelt.db.session import create_engine, create_session_factory

logger = logging.getLogger(__name__)

# Failures of the store are reported next to the classification, never instead of it.
STORE_ERRORS = (SQLAlchemyError, OSError)


class NotFoundError(LookupError):
    pass


class StorageDisabledError(RuntimeError):
    pass


def _number_or_none(value: Any) -> float | None:
    return float(value) if is_number(value) else None


class MonitoringService:
    def __init__(
        self,
        *,
        database_url: str | None = None,
        enable_db: bool | None = None,
        events: AlertEventSink | None = None,
    ) -> None:
        self._cache = TTLCache(maxsize=settings.classification_cache_size, ttl=settings.classification_cache_ttl_s)

        self._engine = None
        self._session_factory = None
        if settings.enable_db if enable_db is None else enable_db:
            self._engine = create_engine(database_url)
            self._session_factory = create_session_factory(self._engine)

        self.events = events or AlertEventSink()
        if settings.enable_notifications:
            self.events.subscribe(log_notifier)

        self._writer = AlertWriter(events=self.events, low_severity_ttl_days=settings.low_severity_alert_ttl_days)

    async def start(self) -> None:
        if self._engine is not None:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    async def stop(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    def _session(self) -> AsyncSession:
        if self._session_factory is None:
            raise StorageDisabledError("Database is disabled (ENABLE_DB=false)")
        return self._session_factory()

    def classify(
        self,
        temperature: Any,
        motion_change: Any,
        humidity: float | None = None,
        pitch: float | None = None,
        roll: float | None = None,
    ) -> HealthClassification:
        if not (is_number(temperature) and is_number(motion_change)):
            return classify(temperature, motion_change, humidity, pitch, roll)

        key = (float(temperature), float(motion_change), pitch, roll)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        result = classify(temperature, motion_change, humidity, pitch, roll)
        self._cache[key] = result
        return result

    async def ingest(self, reading: ReadingIn) -> dict[str, Any]:
        result = self.classify(reading.temperature, reading.motion_change, reading.humidity, reading.pitch, reading.roll)
        anomalies = detect_anomalies(reading.temperature, reading.motion_change)
        insights = generate_health_insights(
            _number_or_none(reading.temperature), _number_or_none(reading.motion_change), result.disease
        )

        out: dict[str, Any] = {
            **result.as_dict(),
            "anomalies": [a.as_dict() for a in anomalies],
            "insights": insights,
            "readingId": None,
            "alerts": [],
            "errors": [],
        }
        if self._session_factory is None:
            out["message"] = "Reading classified (storage disabled)"
            return out

        temperature = _number_or_none(reading.temperature)
        motion_change = _number_or_none(reading.motion_change)

        try:
            async with self._session() as session:
                stored = await repo.insert_reading(
                    session,
                    cow_id=reading.cow_id,
                    temperature=temperature,
                    motion_change=motion_change,
                    pitch=reading.pitch,
                    roll=reading.roll,
                    humidity=reading.humidity,
                    device_id=reading.device_id,
                    battery_level=reading.battery_level,
                    disease=result.disease,
                    health_score=result.confidence * 100,
                    risk_level=result.risk_level,
                    data_quality={
                        "isValid": result.confidence > 0.5,
                        "confidence": result.confidence,
                        "anomalies": [a.type for a in anomalies],
                    },
                )
                out["readingId"] = stored.id
        except STORE_ERRORS as e:
            logger.exception("Failed to store reading for cow %s", reading.cow_id)
            out["errors"].append({"stage": "reading", "error": str(e)})

        try:
            async with self._session() as session:
                health_alert = await self._writer.write_health_alert(
                    session,
                    cow_id=reading.cow_id,
                    classification=result,
                    temperature=temperature,
                    motion_change=motion_change,
                )
                if health_alert is not None:
                    out["alerts"].append(health_alert.alert_id)
        except STORE_ERRORS as e:
            logger.exception("Failed to write health alert for cow %s", reading.cow_id)
            out["errors"].append({"stage": "alerting", "error": str(e)})

        # Anomaly alerts do not depend on the health alert path.
        try:
            async with self._session() as session:
                anomaly_alerts = await self._writer.write_anomaly_alerts(
                    session,
                    cow_id=reading.cow_id,
                    anomalies=anomalies,
                    temperature=temperature,
                    motion_change=motion_change,
                )
                out["alerts"].extend(a.alert_id for a in anomaly_alerts)
        except STORE_ERRORS as e:
            logger.exception("Failed to write anomaly alerts for cow %s", reading.cow_id)
            out["errors"].append({"stage": "anomaly-alerting", "error": str(e)})

        out["message"] = "Data saved successfully" if not out["errors"] else "Reading classified with storage errors"
        return out

    # Readings

    async def latest_readings(self, *, limit: int = 10) -> list[SensorReading]:
        async with self._session() as session:
            return await repo.latest_readings(session, limit=limit)

    async def readings_for_cow(self, cow_id: str, *, limit: int = 50, page: int = 1) -> list[SensorReading]:
        async with self._session() as session:
            return await repo.readings_for_cow(session, cow_id=cow_id, limit=limit, offset=(max(page, 1) - 1) * limit)

    async def all_readings(self, *, limit: int = 20, page: int = 1) -> tuple[list[SensorReading], int]:
        async with self._session() as session:
            return await repo.list_readings(session, limit=limit, page=page)

    async def readings_in_range(
        self, *, start: datetime, end: datetime, cow_id: str | None = None
    ) -> list[SensorReading]:
        start_utc, end_utc = as_utc(start), as_utc(end)
        if start_utc > end_utc:
            raise ValueError("startDate must not be after endDate")
        async with self._session() as session:
            return await repo.readings_between(session, start=start_utc, end=end_utc, cow_id=cow_id)

    async def delete_old_readings(self, *, days: int | None = None) -> int:
        days = settings.reading_retention_days if days is None else days
        async with self._session() as session:
            deleted = await repo.delete_readings_before(session, cutoff=utcnow() - timedelta(days=days))
        logger.info("Deleted %d readings older than %d days", deleted, days)
        return deleted

    async def reading_statistics(self, *, days: int = 7) -> dict[str, Any]:
        async with self._session() as session:
            rows = await repo.readings_since(session, since=utcnow() - timedelta(days=days))
        stats = summarize_readings(
            [
                {
                    "cow_id": r.cow_id,
                    "temperature": r.temperature,
                    "motion_change": r.motion_change,
                    "disease": r.disease,
                    "risk_level": r.risk_level,
                }
                for r in rows
            ]
        )
        return {"period": f"{days} days", **stats}

    async def health_analysis(self, cow_id: str) -> dict[str, Any]:
        async with self._session() as session:
            # Readings missing a temperature or motion value cannot be analysed; use the newest complete one.
            latest = await repo.latest_complete_reading_for_cow(session, cow_id=cow_id)
            if latest is None:
                if await repo.latest_reading_for_cow(session, cow_id=cow_id) is None:
                    raise NotFoundError(f"No data found for cow {cow_id}")
                raise NotFoundError(f"No reading with both temperature and motion for cow {cow_id}")

        return {
            "cowId": cow_id,
            "timestamp": latest.timestamp,
            "current": {
                "temperature": latest.temperature,
                "motionChange": latest.motion_change,
                "disease": latest.disease,
                "riskLevel": latest.risk_level,
                "healthScore": latest.health_score,
            },
            "analysis": analyze_health(latest.temperature, latest.motion_change, latest.disease),
        }

    async def _latest_per_cow(self, *, since_hours: float) -> list[SensorReading]:
        async with self._session() as session:
            rows = await repo.readings_since(session, since=utcnow() - timedelta(hours=since_hours))
        latest: dict[str, SensorReading] = {}
        for r in rows:  # newest first
            latest.setdefault(r.cow_id, r)
        return list(latest.values())

    async def herd_anomalies(self, *, hours: int = 24) -> dict[str, Any]:
        found = []
        for r in await self._latest_per_cow(since_hours=hours):
            anomalies = detect_anomalies(r.temperature, r.motion_change)
            if anomalies:
                found.append(
                    {
                        "cowId": r.cow_id,
                        "timestamp": r.timestamp,
                        "anomalies": [a.as_dict() for a in anomalies],
                        "data": {"temperature": r.temperature, "motionChange": r.motion_change, "disease": r.disease},
                    }
                )
        return {"period": f"{hours} hours", "totalAnomalies": len(found), "anomalies": found}

    async def herd_insights(self, *, days: int = 1) -> dict[str, Any]:
        found = []
        for r in await self._latest_per_cow(since_hours=days * 24):
            insights = generate_health_insights(r.temperature, r.motion_change, r.disease)
            if insights:
                found.append(
                    {
                        "cowId": r.cow_id,
                        "timestamp": r.timestamp,
                        "insights": insights,
                        "healthScore": r.health_score,
                        "riskLevel": r.risk_level,
                    }
                )
        found.sort(key=lambda item: max_priority(item["insights"]), reverse=True)
        return {"period": f"{days} days", "totalInsights": len(found), "insights": found}

    # Alerts

    async def create_alert(self, req: AlertCreateRequest) -> Alert:
        async with self._session() as session:
            return await self._writer.write_manual_alert(
                session,
                alert_type=req.type,
                severity=req.severity,
                title=req.title,
                message=req.message,
                description=req.description,
                cow_id=req.cow_id,
                device_id=req.device_id,
                farm_id=req.farm_id,
                data=req.data,
                priority=req.priority,
                tags=req.tags,
            )

    async def list_alerts(self, **filters: Any) -> tuple[list[Alert], int]:
        async with self._session() as session:
            return await repo.list_alerts(session, **filters)

    async def active_alerts(self, *, limit: int = 20) -> list[Alert]:
        async with self._session() as session:
            return await repo.active_alerts(session, limit=limit)

    async def critical_alerts(self) -> list[Alert]:
        async with self._session() as session:
            return await repo.critical_alerts(session)

    async def alert_statistics(self, *, days: int = 30) -> dict[str, Any]:
        async with self._session() as session:
            rows = await repo.alerts_since(session, since=utcnow() - timedelta(days=days))
        stats = summarize_alerts(
            [
                {"type": a.type, "severity": a.severity, "status": a.status, "resolution_time": a.resolution_time}
                for a in rows
            ]
        )
        return {"period": f"{days} days", **stats}

    async def delete_old_alerts(self, *, days: int | None = None) -> int:
        days = settings.old_alert_retention_days if days is None else days
        async with self._session() as session:
            deleted = await repo.delete_resolved_alerts_before(session, cutoff=utcnow() - timedelta(days=days))
        logger.info("Deleted %d old resolved alerts", deleted)
        return deleted

    async def _update_alert(self, alert_id: str, apply: Callable[[Alert], Alert]) -> Alert:
        async with self._session() as session:
            alert = await repo.get_alert(session, alert_id=alert_id)
            if alert is None:
                raise NotFoundError(f"Alert not found: {alert_id}")
            apply(alert)
            alert.updated_at = utcnow()
            await session.commit()
            return alert

    async def acknowledge_alert(self, alert_id: str, *, acknowledged_by: str, note: str | None = None) -> Alert:
        return await self._update_alert(alert_id, lambda a: lifecycle.acknowledge(a, acknowledged_by, note))

    async def resolve_alert(self, alert_id: str, *, resolved_by: str, note: str | None = None) -> Alert:
        return await self._update_alert(alert_id, lambda a: lifecycle.resolve(a, resolved_by, note))

    async def escalate_alert(self, alert_id: str, *, escalated_to: str, reason: str) -> Alert:
        return await self._update_alert(alert_id, lambda a: lifecycle.escalate(a, escalated_to, reason))

    async def add_alert_action(
        self,
        alert_id: str,
        *,
        action_type: str,
        performed_by: str | None = None,
        result: str | None = None,
        success: bool = True,
    ) -> Alert:
        return await self._update_alert(
            alert_id, lambda a: lifecycle.add_action(a, action_type, performed_by, result, success)
        )
