"""
HTTP endpoints for ScootGuard.

This module implements the route-safety API together with health,
readiness, metrics, and info endpoints for operational visibility.
"""

from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from pydantic import BaseModel
import time
from scootguard.settings import Settings
from scootguard.core.errors import GeneratorUnavailable, ValidationError
from scootguard.core.models import Destination
from scootguard.core.severity import classify
from scootguard.observability import metrics as route_metrics
from scootguard.observability.logging_setup import get_logger
from scootguard.orchestrators.route_safety import RouteSafetyOrchestrator
from scootguard.ports.reports import ReportStorePort

log = get_logger("scootguard.http")

class AnalyzeRouteRequest(BaseModel):
    """POST /api/analyze-route 요청 본문"""
    startLat: Optional[float] = None
    startLng: Optional[float] = None
    endLat: Optional[float] = None
    endLng: Optional[float] = None
    destinationName: str = ""

def create_app(settings: Settings,
               store: ReportStorePort,
               orchestrator: RouteSafetyOrchestrator) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="ScootGuard E-Scooter Route Safety Service"
    )

    start_time = time.time()

    @app.post("/api/analyze-route")
    async def analyze_route(body: AnalyzeRouteRequest):
        """목적지 도난 위험과 대체 주차 후보지를 분석합니다."""
        destination = Destination(
            latitude=body.endLat,
            longitude=body.endLng,
            name=body.destinationName,
        )
        try:
            analysis = await orchestrator.analyze_route((body.startLat, body.startLng), destination)
        except ValidationError as e:
            log.info(f"경로 분석 요청 검증 실패 field:{e.field}")
            return JSONResponse({"error": str(e), "field": e.field}, status_code=400)

        return JSONResponse(analysis.to_wire())

    @app.get("/api/scooter-reports")
    async def scooter_reports():
        """저장된 도난 신고 전체를 반환합니다."""
        reports = await store.fetch_all_reports()
        route_metrics.stored_reports.set(len(reports))
        return JSONResponse({"reports": [r.to_wire(classify(r)) for r in reports]})

    @app.get("/api/parking-suggestions")
    async def parking_suggestions():
        """도난 위치를 바탕으로 주차 팁을 생성합니다."""
        try:
            suggestions = await orchestrator.suggest_parking()
        except GeneratorUnavailable as e:
            log.error(f"주차 팁 생성 실패 error:{str(e)}")
            raise HTTPException(status_code=503, detail="Parking suggestions unavailable")
        return JSONResponse({"suggestions": suggestions})

    @app.get("/api/safety-zones")
    async def safety_zones():
        """안전 주차 구역 참조 데이터를 반환합니다."""
        return JSONResponse({"zones": [z.model_dump() for z in orchestrator.zones]})

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트 (저장소 조회 가능 여부)"""
        try:
            count = await store.count()
        except Exception as e:
            log.error(f"레디니스 체크 실패 error:{str(e)}")
            return JSONResponse({
                "status": "not_ready",
                "service": settings.observability.service_name,
                "timestamp": time.time()
            }, status_code=503)

        route_metrics.stored_reports.set(count)
        return JSONResponse({
            "status": "ready",
            "service": settings.observability.service_name,
            "reports": count,
            "timestamp": time.time()
        })

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        return Response(
            generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "narrative_enabled": settings.narrative.enabled,
            "log_level": settings.observability.log_level
        })

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "analyze_route": "/api/analyze-route",
                "scooter_reports": "/api/scooter-reports",
                "parking_suggestions": "/api/parking-suggestions",
                "safety_zones": "/api/safety-zones",
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info"
            }
        })

    return app
