"""
HTTP endpoints for GeoWeather observability.

This module implements health, readiness, metrics, and info endpoints
for monitoring and operational visibility.
"""

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import time
from typing import Optional
from geoweather.settings import Settings
from geoweather.observability.logging_setup import get_logger
from geoweather.ports.event_store import WeatherEventStorePort

log = get_logger("geoweather.http")

def create_app(settings: Settings, store: Optional[WeatherEventStorePort] = None) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="GeoWeather Placement & Routing Engine"
    )

    start_time = time.time()

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
        now = time.time()
        if store is None:
            return JSONResponse({"status": "ready", "store": "none", "timestamp": now})

        try:
            active = await store.query(now)
        except Exception as e:
            log.error(f"레디니스 저장소 조회 실패 error:{str(e)}")
            return JSONResponse(
                {"status": "not_ready", "error": str(e), "timestamp": now},
                status_code=503
            )
        return JSONResponse({
            "status": "ready",
            "active_events": len(active),
            "timestamp": now
        })

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        try:
            return Response(
                generate_latest(),
                media_type=CONTENT_TYPE_LATEST
            )
        except Exception as e:
            log.error(f"메트릭 생성 오류: {e}")
            raise HTTPException(status_code=500, detail="Metrics generation failed")

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
            "log_level": settings.observability.log_level,
            "weather_enabled": settings.weather.enabled,
            "elevation_enabled": settings.elevation.enabled
        })

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info"
            }
        })

    return app
