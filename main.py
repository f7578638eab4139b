"""
FastAPI application entry point.

Registers routers, middleware, and exception handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone

from flashdash.config.settings import settings
from flashdash.utils.exceptions import BaseAPIException
from flashdash.utils.exception_handlers import (
    base_api_exception_handler,
    request_validation_exception_handler,
    http_exception_handler,
    general_exception_handler,
)
from flashdash.utils.logger import get_logger
from flashdash.apps.auth.routers import router as auth_router
from flashdash.apps.admin.routers import router as admin_router
from flashdash.apps.submissions.routers import router as submissions_router
from flashdash.apps.access.routers import router as access_router
from flashdash.apps.mapping.routers import router as mapping_router
from flashdash.db.database import create_tables
from flashdash.db.session import get_session

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup/shutdown lifecycle events."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} [{settings.ENVIRONMENT}]")
    if not settings.JWT_SECRET_KEY:
        logger.warning("JWT_SECRET_KEY is not set; login will fail with 500")
    if not settings.FORTH_CRM_URL:
        logger.warning("FORTH_CRM_URL is not set; lead submissions will fail with 500")
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
    yield
    logger.info("Shutdown complete")


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="FlashDash CRM back end: auth, employee admin, lead intake proxy",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ── Middleware ────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ── Exception Handlers ────────────────────────────────────────────────────────

app.add_exception_handler(BaseAPIException, base_api_exception_handler)          # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(StarletteHTTPException, http_exception_handler)         # type: ignore[arg-type]
app.add_exception_handler(Exception, general_exception_handler)


# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(submissions_router)
app.include_router(access_router)
app.include_router(mapping_router)

# ── Metrics Mount ─────────────────────────────────────────────────────────────
app.mount("/metrics", make_asgi_app())


# ── Health ────────────────────────────────────────────────────────────────────

@app.get("/health", tags=["Infra"])
async def health():
    """Liveness probe."""
    return {"status": "ok", "version": settings.APP_VERSION}


@app.get("/ready", tags=["Infra"])
async def ready(session: AsyncSession = Depends(get_session)):
    """
    Readiness probe: verifies the database is reachable.
    Returns 503 if it is not.
    """
    checks = {}
    healthy = True

    try:
        await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        logger.error(f"DB health check failed: {e}")
        checks["database"] = f"error: {str(e)[:80]}"
        healthy = False

    payload = {
        "status": "ready" if healthy else "degraded",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    if not healthy:
        return JSONResponse(status_code=503, content=payload)

    return payload
