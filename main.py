"""
Song List API

Upload a CSV of songs (song name, band, year), import the bundled sample,
and list the stored rows ordered by band. Rows live in a Supabase table.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import limiter
from api.health import router as health_router
from api.songs import router as songs_router
from config.logging_config import setup_logging
from config.settings import get_settings
from data.song_store import SupabaseSongStore

# =========================
# Configuration (fails fast without Supabase credentials)
# =========================

settings = get_settings()

setup_logging(settings.log_level)
logger = logging.getLogger("songlist")

if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=1.0 if settings.debug else 0.1,
        environment=settings.environment.value,
    )

limiter.enabled = settings.rate_limit_enabled


# =========================
# Lifespan
# =========================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the song store on startup"""
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    logger.info("Environment: %s", settings.environment.value)

    app.state.song_store = SupabaseSongStore.from_credentials(
        settings.supabase_url,
        settings.supabase_key,
        table=settings.songs_table,
    )

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.project_name,
    description="Upload, import and list songs stored in Supabase.",
    version=settings.version,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

if settings.metrics_enabled:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")


# =========================
# Routers
# =========================

app.include_router(health_router)
app.include_router(songs_router, prefix="/songs", tags=["Songs"])


# =========================
# Error Handling
# =========================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = str(uuid.uuid4())

    if exc.status_code >= 500 and settings.sentry_dsn:
        sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": str(request.url.path),
            "method": request.method,
            "request_id": request_id,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    error_id = str(uuid.uuid4())
    logger.exception("Unhandled error %s on %s %s", error_id, request.method, request.url.path)

    if settings.sentry_dsn:
        sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "error_id": error_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": str(request.url.path),
            "method": request.method,
            "request_id": error_id,
        },
    )


# =========================
# Server Startup
# =========================

if __name__ == "__main__":
    import uvicorn

    logger.info("Docs: http://localhost:%s/docs", settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info" if settings.debug else "warning",
    )
