"""
Trender Backend Main Application

FastAPI entry point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trender import __version__
from trender.api import api_router
from trender.config import settings
from trender.core import Database, TrenderError
from trender.core.logging_config import setup_logging
from trender.schemas import ErrorResponse, HealthResponse
from trender.services import monitoring_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the connection pool on startup and dispose of it on shutdown"""
    setup_logging()
    logger.info(f"🚀 Starting {settings.app_name} v{__version__} ({settings.env})")

    # A missing or malformed DATABASE_URL aborts startup with ConfigError
    database = Database().init()
    app.state.database = database

    yield

    logger.info("👋 Shutting down...")
    await database.shutdown()
    app.state.database = None


app = FastAPI(
    title=settings.app_name,
    description="Trend cards and time-bucketed feed ingestion",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========== Error envelopes ==========

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={"ok": False, "error": errors})


@app.exception_handler(TrenderError)
async def trender_exception_handler(request: Request, exc: TrenderError):
    logger.error(f"❌ {exc.__class__.__name__} on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"ok": False, "error": "Internal server error"})


# ========== Liveness and metrics ==========

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness"""
    return HealthResponse(status="ok", version=__version__, env=settings.env)


@app.get("/metrics", responses={404: {"model": ErrorResponse}})
async def prometheus_metrics():
    """Prometheus exposition"""
    if not settings.metrics_enabled:
        return JSONResponse(status_code=404, content={"ok": False, "error": "Metrics are disabled"})
    payload, content_type = monitoring_service.get_prometheus_metrics()
    return Response(content=payload, media_type=content_type)


app.include_router(api_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "trender.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
