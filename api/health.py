"""
Health check API endpoints for monitoring and the client's connectivity poll.
"""
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from api.dependencies import get_app_settings, get_song_store
from api.schemas.songs import AppInfo, HealthStatus
from config.settings import Settings
from data.song_store import SongStore, SongStoreError

router = APIRouter(tags=["Health"])

STARTED_AT = time.monotonic()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get(
    "/",
    response_model=HealthStatus,
    summary="Health check endpoint",
    description="Returns service status, timestamp and process uptime",
    status_code=status.HTTP_200_OK,
)
def health_check() -> HealthStatus:
    """
    Lightweight liveness check. Never touches the database.
    """
    return HealthStatus(
        status="ok",
        timestamp=_timestamp(),
        uptime=round(time.monotonic() - STARTED_AT, 3),
    )


@router.get("/info", response_model=AppInfo, summary="Application information")
def app_info(settings: Settings = Depends(get_app_settings)) -> AppInfo:
    return AppInfo(
        name=settings.project_name,
        version=settings.version,
        environment=settings.environment.value,
    )


@router.get(
    "/health/detailed",
    summary="Detailed health check",
    description="Returns service health including the database",
)
def detailed_health_check(store: SongStore = Depends(get_song_store)) -> Dict[str, Any]:
    """
    Detailed health check including dependency status.

    Reports "degraded" rather than failing when the database is unreachable.
    """
    dependencies = {"api": "healthy"}

    try:
        store.ping()
        dependencies["database"] = "healthy"
    except SongStoreError as e:
        dependencies["database"] = f"unreachable: {e}"

    overall = "healthy" if dependencies["database"] == "healthy" else "degraded"

    return {
        "status": overall,
        "timestamp": _timestamp(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "dependencies": dependencies,
    }
