# catalog_api/main.py
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy import inspect, text
from sqlalchemy.orm import Session
from starlette.responses import JSONResponse

from catalog_api.core.error_handler import (
    ErrorContextRoute,
    NormalizedError,
    build_error_envelope,
    register_exception_handlers,
)
from catalog_api.core.errors import DatabaseUnavailableError, error_kind_for_status
from catalog_api.core.logging import setup_logging
from catalog_api.core.settings import Settings, get_settings
from catalog_api.database import build_engine, build_session_factory, create_all, get_db, mask_url
from catalog_api.routers.category import router as categories_router
from catalog_api.routers.product import router as products_router
from catalog_api.schemas.common import iso_utc

logger = logging.getLogger("catalog-api")

ALEMBIC_VERSION_TABLE = "alembic_version"

tags_metadata = [
    {"name": "health", "description": "Liveness/Readiness checks"},
    {"name": "categories", "description": "Category CRUD & listing"},
    {"name": "products", "description": "Product CRUD, search & derived pricing"},
]


def _get_req_id_from_headers(request: Request) -> str:
    # Prefer X-Request-ID, apoi X-Correlation-ID; dacă lipsesc, generează unul.
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )


# --- Middleware ---
async def request_context_mw(request: Request, call_next):
    """
    - Generează/propagă X-Request-ID (și îl pune pe request.state pentru error handler)
    - Limitează mărimea corpului când Content-Length e disponibil
    - Headers de securitate + Server-Timing / X-Process-Time
    - Access log: metodă, path, status, durată
    """
    req_id = _get_req_id_from_headers(request)
    request.state.request_id = req_id
    settings: Settings = request.app.state.settings

    if settings.max_body_size_bytes > 0:
        cl = request.headers.get("content-length")
        if cl is not None and cl.isdigit() and int(cl) > settings.max_body_size_bytes:
            exc = ValueError("request entity too large")
            normalized = NormalizedError(413, error_kind_for_status(413), "Payload too large")
            envelope = build_error_envelope(request, exc, normalized, include_stack=False)
            return JSONResponse(
                status_code=413,
                content=envelope.model_dump(mode="json", exclude_none=True),
                headers={"X-Request-ID": req_id},
            )

    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("X-App-Version", settings.app_version)
    response.headers.setdefault("Server-Timing", f"app;dur={duration_ms:.1f}")
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")

    logger.info(
        '%s "%s %s" %s %.1fms rid=%s',
        request.client.host if request.client else "-",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        req_id,
    )
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = app.state.engine
    if settings.db_create_all:
        create_all(engine)
        logger.info("Tables created (DB_CREATE_ALL=1)")
    # Startup: sanity check DB (nu blocăm pornirea dacă DB nu răspunde)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("DB startup check OK (%s, env=%s)", mask_url(settings.database_url), settings.app_env)
    except Exception:
        logger.exception("DB startup check FAILED")

    yield

    engine.dispose()
    logger.info("Shutdown complete: DB engine disposed")


def _alembic_version(db: Session) -> tuple[Optional[str], bool]:
    if not inspect(db.get_bind()).has_table(ALEMBIC_VERSION_TABLE):
        return None, False
    version = db.execute(text(f"SELECT version_num FROM {ALEMBIC_VERSION_TABLE}")).scalar_one_or_none()
    return version, True


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.router.route_class = ErrorContextRoute

    # config + store injectate o singură dată, citite din app.state
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.middleware("http")(request_context_mw)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    if settings.cors_origin_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Total-Count", "X-Request-ID", "Server-Timing", "X-Process-Time"],
        )

    register_exception_handlers(app)

    # --- Routes: health ---
    @app.get("/health", tags=["health"])
    def health(request: Request):
        s: Settings = request.app.state.settings
        return {
            "status": "UP",
            "message": "Service is running smoothly",
            "timestamp": iso_utc(datetime.now(timezone.utc)),
            "environment": s.app_env,
            "version": s.app_version,
        }

    @app.get("/health/db", tags=["health"])
    def health_db(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("DB health check failed: %s", exc)
            raise DatabaseUnavailableError() from exc
        return {"status": "ok", "db": "up", "dialect": db.get_bind().dialect.name}

    @app.get("/health/migrations", tags=["health"])
    def health_migrations(db: Session = Depends(get_db)):
        version, present = _alembic_version(db)
        return {"alembicVersion": version, "present": present}

    app.include_router(categories_router)
    app.include_router(products_router)
    return app


app = create_app()
