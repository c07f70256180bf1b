from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from cowbelt.alerts.lifecycle import AlertTransitionError
from cowbelt.api.schemas import (
    AcknowledgeRequest,
    ActionRequest,
    AlertCreateRequest,
    AlertOut,
    AlertPage,
    EscalateRequest,
    IngestResponse,
    Pagination,
    ReadingIn,
    ReadingOut,
    ReadingPage,
    ReadingRange,
    ResolveRequest,
)
from cowbelt.config import settings
from cowbelt.ingest.service import MonitoringService, NotFoundError, StorageDisabledError

router = APIRouter()


def get_service(request: Request) -> MonitoringService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return service


def _pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit)
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_records=total,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.post("/api/cow/data", response_model=IngestResponse)
async def add_cow_data(reading: ReadingIn, service: MonitoringService = Depends(get_service)) -> dict:
    return await service.ingest(reading)


@router.get("/api/cow/data", response_model=list[ReadingOut])
async def last_cow_data(
    limit: int = Query(10, ge=1, le=500), service: MonitoringService = Depends(get_service)
) -> list[ReadingOut]:
    return [ReadingOut.from_reading(r) for r in await service.latest_readings(limit=limit)]


@router.get("/api/cow/data/all", response_model=ReadingPage)
async def all_cow_data(
    limit: int = Query(20, ge=1, le=500),
    page: int = Query(1, ge=1),
    service: MonitoringService = Depends(get_service),
) -> ReadingPage:
    readings, total = await service.all_readings(limit=limit, page=page)
    return ReadingPage(data=[ReadingOut.from_reading(r) for r in readings], pagination=_pagination(page, limit, total))


@router.get("/api/cow/data/range", response_model=ReadingRange)
async def cow_data_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    cow_id: str | None = Query(None, alias="cowId"),
    service: MonitoringService = Depends(get_service),
) -> ReadingRange:
    readings = await service.readings_in_range(start=start_date, end=end_date, cow_id=cow_id)
    return ReadingRange(
        data=[ReadingOut.from_reading(r) for r in readings],
        count=len(readings),
        date_range={"startDate": start_date, "endDate": end_date},
        cow_id=cow_id or "All",
    )


@router.delete("/api/cow/data/cleanup")
async def delete_old_cow_data(
    days: int | None = Query(None, ge=0), service: MonitoringService = Depends(get_service)
) -> dict:
    deleted = await service.delete_old_readings(days=days)
    return {"message": f"Deleted {deleted} old readings", "deletedCount": deleted}


@router.get("/api/cow/data/statistics")
async def cow_statistics(days: int = Query(7, ge=1), service: MonitoringService = Depends(get_service)) -> dict:
    return await service.reading_statistics(days=days)


@router.get("/api/cow/data/cow/{cow_id}", response_model=list[ReadingOut])
async def cow_data_by_id(
    cow_id: str,
    limit: int = Query(50, ge=1, le=500),
    page: int = Query(1, ge=1),
    service: MonitoringService = Depends(get_service),
) -> list[ReadingOut]:
    return [ReadingOut.from_reading(r) for r in await service.readings_for_cow(cow_id, limit=limit, page=page)]


@router.post("/api/alerts", response_model=AlertOut, status_code=201)
async def create_alert(req: AlertCreateRequest, service: MonitoringService = Depends(get_service)) -> AlertOut:
    return AlertOut.from_alert(await service.create_alert(req))


@router.get("/api/alerts", response_model=AlertPage)
async def get_alerts(
    status: str | None = None,
    severity: str | None = None,
    alert_type: str | None = Query(None, alias="type"),
    cow_id: str | None = Query(None, alias="cowId"),
    farm_id: str | None = Query(None, alias="farmId"),
    limit: int = Query(50, ge=1, le=500),
    page: int = Query(1, ge=1),
    service: MonitoringService = Depends(get_service),
) -> AlertPage:
    alerts, total = await service.list_alerts(
        status=status, severity=severity, alert_type=alert_type, cow_id=cow_id, farm_id=farm_id, limit=limit, page=page
    )
    return AlertPage(alerts=[AlertOut.from_alert(a) for a in alerts], pagination=_pagination(page, limit, total))


@router.get("/api/alerts/active", response_model=list[AlertOut])
async def get_active_alerts(
    limit: int = Query(20, ge=1, le=500), service: MonitoringService = Depends(get_service)
) -> list[AlertOut]:
    return [AlertOut.from_alert(a) for a in await service.active_alerts(limit=limit)]


@router.get("/api/alerts/critical", response_model=list[AlertOut])
async def get_critical_alerts(service: MonitoringService = Depends(get_service)) -> list[AlertOut]:
    return [AlertOut.from_alert(a) for a in await service.critical_alerts()]


@router.get("/api/alerts/statistics")
async def get_alert_statistics(days: int = Query(30, ge=1), service: MonitoringService = Depends(get_service)) -> dict:
    return await service.alert_statistics(days=days)


@router.delete("/api/alerts/cleanup")
async def delete_old_alerts(days: int | None = Query(None, ge=0), service: MonitoringService = Depends(get_service)) -> dict:
    deleted = await service.delete_old_alerts(days=days)
    return {"message": f"Deleted {deleted} old resolved alerts", "deletedCount": deleted}


@router.put("/api/alerts/{alert_id}/acknowledge", response_model=AlertOut)
async def acknowledge_alert(
    alert_id: str, req: AcknowledgeRequest, service: MonitoringService = Depends(get_service)
) -> AlertOut:
    alert = await service.acknowledge_alert(alert_id, acknowledged_by=req.acknowledged_by, note=req.acknowledgment_note)
    return AlertOut.from_alert(alert)


@router.put("/api/alerts/{alert_id}/resolve", response_model=AlertOut)
async def resolve_alert(alert_id: str, req: ResolveRequest, service: MonitoringService = Depends(get_service)) -> AlertOut:
    alert = await service.resolve_alert(alert_id, resolved_by=req.resolved_by, note=req.resolution_note)
    return AlertOut.from_alert(alert)


@router.put("/api/alerts/{alert_id}/escalate", response_model=AlertOut)
async def escalate_alert(
    alert_id: str, req: EscalateRequest, service: MonitoringService = Depends(get_service)
) -> AlertOut:
    alert = await service.escalate_alert(alert_id, escalated_to=req.escalated_to, reason=req.escalation_reason)
    return AlertOut.from_alert(alert)


@router.post("/api/alerts/{alert_id}/actions", response_model=AlertOut)
async def add_alert_action(alert_id: str, req: ActionRequest, service: MonitoringService = Depends(get_service)) -> AlertOut:
    alert = await service.add_alert_action(
        alert_id,
        action_type=req.action_type,
        performed_by=req.performed_by,
        result=req.result,
        success=req.success,
    )
    return AlertOut.from_alert(alert)


@router.get("/api/ml/health-analysis")
async def health_analysis(cow_id: str = Query(..., alias="cowId"), service: MonitoringService = Depends(get_service)) -> dict:
    return await service.health_analysis(cow_id)


@router.get("/api/ml/anomalies")
async def herd_anomalies(hours: int = Query(24, ge=1), service: MonitoringService = Depends(get_service)) -> dict:
    return await service.herd_anomalies(hours=hours)


@router.get("/api/ml/insights")
async def herd_insights(days: int = Query(1, ge=1), service: MonitoringService = Depends(get_service)) -> dict:
    return await service.herd_insights(days=days)


def _error(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(service: MonitoringService | None = None) -> FastAPI:
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.service = service or MonitoringService()
        await app.state.service.start()
        yield
        await app.state.service.stop()

    app = FastAPI(title="Cow Belt Health Monitoring", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    app.add_exception_handler(NotFoundError, _error(404))
    app.add_exception_handler(AlertTransitionError, _error(409))
    app.add_exception_handler(ValueError, _error(400))
    app.add_exception_handler(StorageDisabledError, _error(503))
    return app


app = create_app()
