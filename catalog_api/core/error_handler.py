# catalog_api/core/error_handler.py
"""
Punctul unic de traducere a erorilor în envelope-ul standard:

    {"success": false,
     "error": {"type", "message", "code"?, "details"?, "stack"?},
     "timestamp", "path", "method"}

Orice eșec (validare request, validatori de model, cast, index unic, not-found,
conectivitate DB, neprevăzut) trece prin `normalize_exception`.
"""
from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Coroutine, Dict, List, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from catalog_api.core.errors import (
    STATUS_BY_KIND,
    AppError,
    DuplicateKeyError,
    ErrorKind,
    StoreCastError,
    StoreError,
    StoreValidationError,
    error_kind_for_status,
)
from catalog_api.crud.base import is_unique_violation, unique_violation_column
from catalog_api.schemas.common import ErrorBody, ErrorDetail, ErrorEnvelope, iso_utc

logger = logging.getLogger(__name__)

# locațiile FastAPI → secțiunile schemei (body / query / params)
_SECTION_NAMES = {"body": "body", "query": "query", "path": "params", "header": "headers", "cookie": "cookies"}

_CONNECTIVITY_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.DisconnectionError,
    sa_exc.TimeoutError,
)

# PG SQLSTATE pentru NOT NULL / CHECK
_PG_CONSTRAINT_CODES = {"23502", "23514"}


@dataclass
class NormalizedError:
    status_code: int
    kind: ErrorKind
    message: str
    code: Optional[str] = None
    details: List[Dict[str, Any]] = field(default_factory=list)


def _normalized(kind: ErrorKind, message: str, details: Optional[List[Dict[str, Any]]] = None) -> NormalizedError:
    return NormalizedError(STATUS_BY_KIND[kind], kind, message, details=details or [])


# -------------------------- Formatters --------------------------

def _loc_to_field(loc: Any) -> str:
    parts = [str(p) for p in (loc or ())]
    if parts and parts[0] in _SECTION_NAMES:
        parts[0] = _SECTION_NAMES[parts[0]]
    return ".".join(parts)


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Câte un detaliu pentru fiecare câmp invalid (nu doar primul)."""
    return [
        {"field": _loc_to_field(err.get("loc")), "message": err.get("msg", "Invalid value"), "code": err.get("type")}
        for err in errors
    ]


def _format_store_validation(exc: StoreValidationError) -> NormalizedError:
    return _normalized(ErrorKind.VALIDATION_ERROR, "Database validation failed", list(exc.violations))


def _format_cast(exc: StoreCastError) -> NormalizedError:
    return _normalized(
        ErrorKind.VALIDATION_ERROR,
        f"Invalid {exc.field}",
        [{"field": exc.field, "message": f"Invalid {exc.kind}", "value": exc.value}],
    )


def _format_duplicate(field_name: str, value: Any) -> NormalizedError:
    return _normalized(
        ErrorKind.DUPLICATE_ERROR,
        f"Duplicate value for {field_name}",
        [{"field": field_name, "message": f"{field_name} '{value}' already exists", "value": value}],
    )


def _format_integrity(exc: sa_exc.IntegrityError) -> NormalizedError:
    if is_unique_violation(exc):
        column, value = unique_violation_column(exc)
        return _format_duplicate(column or "unknown", value)
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    text = str(orig or exc)
    if pgcode in _PG_CONSTRAINT_CODES or "NOT NULL constraint" in text or "CHECK constraint" in text:
        return _normalized(ErrorKind.VALIDATION_ERROR, "Database validation failed")
    return _normalized(ErrorKind.VALIDATION_ERROR, "Integrity error")


def _format_http_exception(exc: StarletteHTTPException, request: Request) -> NormalizedError:
    # rută/metodă inexistentă → 404 unitar
    if exc.status_code in (404, 405):
        url = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        return _normalized(ErrorKind.NOT_FOUND_ERROR, f"Route {url} not found")
    kind = error_kind_for_status(exc.status_code)
    return NormalizedError(exc.status_code, kind, str(exc.detail))


# -------------------------- Normalizer --------------------------

def normalize_exception(exc: BaseException, request: Request) -> NormalizedError:
    if isinstance(exc, RequestValidationError):
        return _normalized(ErrorKind.VALIDATION_ERROR, "Validation failed", format_validation_errors(list(exc.errors())))
    if isinstance(exc, PydanticValidationError):
        return _normalized(ErrorKind.VALIDATION_ERROR, "Validation failed", format_validation_errors(exc.errors()))
    if isinstance(exc, StoreValidationError):
        return _format_store_validation(exc)
    if isinstance(exc, StoreCastError):
        return _format_cast(exc)
    if isinstance(exc, DuplicateKeyError):
        return _format_duplicate(exc.field, exc.value)
    if isinstance(exc, sa_exc.IntegrityError):
        return _format_integrity(exc)
    if isinstance(exc, sa_exc.DataError):
        return _normalized(ErrorKind.VALIDATION_ERROR, "Invalid value for a database field")
    if isinstance(exc, AppError):
        return NormalizedError(exc.status_code, exc.kind, exc.message, code=exc.code, details=list(exc.details))
    if isinstance(exc, _CONNECTIVITY_ERRORS):
        return _normalized(ErrorKind.DATABASE_ERROR, "Database connection failed")
    if isinstance(exc, StarletteHTTPException):
        return _format_http_exception(exc, request)
    return _normalized(ErrorKind.INTERNAL_SERVER_ERROR, str(exc) or "Internal Server Error")


# -------------------------- Rendering --------------------------

def _client_ip(request: Request) -> Optional[str]:
    fwd = request.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip()
    return request.client.host if request.client else None


def _log_server_error(request: Request, exc: BaseException, normalized: NormalizedError) -> None:
    context = {
        "message": str(exc),
        "status": normalized.status_code,
        "url": str(request.url),
        "method": request.method,
        "body": getattr(request.state, "body", None),
        "params": dict(request.path_params),
        "query": dict(request.query_params),
        "ip": _client_ip(request),
        "userAgent": request.headers.get("user-agent"),
        "requestId": getattr(request.state, "request_id", None),
        "timestamp": iso_utc(datetime.now(timezone.utc)),
    }
    logger.error("Server Error: %s", context, exc_info=(type(exc), exc, exc.__traceback__))


def build_error_envelope(request: Request, exc: BaseException, normalized: NormalizedError, *, include_stack: bool) -> ErrorEnvelope:
    stack = None
    if include_stack:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return ErrorEnvelope(
        error=ErrorBody(
            type=normalized.kind.value,
            message=normalized.message,
            code=normalized.code,
            details=[ErrorDetail(**d) for d in normalized.details] or None,
            stack=stack,
        ),
        timestamp=iso_utc(datetime.now(timezone.utc)),
        path=request.url.path,
        method=request.method,
    )


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    normalized = normalize_exception(exc, request)
    if normalized.status_code >= 500:
        _log_server_error(request, exc, normalized)

    settings = getattr(request.app.state, "settings", None)
    include_stack = settings is not None and not settings.is_production
    envelope = build_error_envelope(request, exc, normalized, include_stack=include_stack)

    headers = {}
    if isinstance(exc, StarletteHTTPException) and exc.headers:
        headers.update(exc.headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers["X-Request-ID"] = request_id
    return JSONResponse(
        status_code=normalized.status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class in (
        RequestValidationError,
        PydanticValidationError,
        StarletteHTTPException,
        AppError,
        StoreError,
        sa_exc.SQLAlchemyError,
        Exception,
    ):
        app.add_exception_handler(exc_class, handle_exception)


# -------------------------- Route class --------------------------

class ErrorContextRoute(APIRoute):
    """
    Păstrează body-ul request-ului pe `request.state.body` când handler-ul eșuează,
    ca să apară în logul erorilor de server.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def custom_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except Exception:
                try:
                    raw = await request.body()
                    request.state.body = raw.decode("utf-8", errors="replace") if raw else None
                except Exception:  # pragma: no cover - body indisponibil (stream consumat/deconectat)
                    request.state.body = None
                raise

        return custom_route_handler
