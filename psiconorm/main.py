from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import psiconorm.models  # noqa: F401  registers ORM tables on Base.metadata
from psiconorm.core.config import settings, validate_runtime_settings
from psiconorm.core.logging import configure_logging, correlation_context, get_logger
from psiconorm.core.metrics import get_counters, get_metrics
from psiconorm.core.numeric import safe_round
from psiconorm.db.database import Base, engine, get_db
from psiconorm.routers.exceptions import register_exception_handlers
from psiconorm.routers.score import router as score_router
from psiconorm.routers.tables import router as tables_router

configure_logging(environment=settings.environment)
logger = get_logger("psiconorm.main", component="app")

_app_start_time = datetime.now(timezone.utc)
_CORRELATION_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate settings and, outside production, create the schema."""
    validate_runtime_settings()
    if settings.run_startup_ddl:
        logger.info("startup_execute_ddl", extra={"structured_data": {"run_startup_ddl": True}})
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

app.include_router(score_router)
app.include_router(tables_router)


@app.middleware("http")
async def bind_correlation_id(request: Request, call_next):
    with correlation_context(request.headers.get(_CORRELATION_HEADER)) as correlation_id:
        response = await call_next(request)
    response.headers[_CORRELATION_HEADER] = correlation_id
    return response


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Application status plus database connectivity and metrics summary."""
    now = datetime.now(timezone.utc)
    uptime = (now - _app_start_time).total_seconds()
    counters = get_counters()
    metrics = get_metrics()
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
        overall_status = "healthy"
    except SQLAlchemyError as exc:
        logger.error("health_check_db_failed", extra={"structured_data": {"error": str(exc)}})
        db_status = "disconnected"
        overall_status = "unhealthy"
    return {
        "status": overall_status,
        "started_at": _app_start_time.isoformat(),
        "uptime_seconds": safe_round(uptime, 2),
        "environment": settings.environment,
        "database": {
            "status": db_status,
            "engine": engine.url.get_backend_name(),
        },
        "metrics_summary": {
            "tracked_operations": len(metrics),
            "tracked_counters": len(counters),
            "scores_computed": int(counters.get("scoring.score.calls", 0)),
        },
    }


@app.get("/", include_in_schema=False)
def root():
    return {
        "name": settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)
