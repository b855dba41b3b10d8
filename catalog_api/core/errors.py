# catalog_api/core/errors.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
    DUPLICATE_ERROR = "DUPLICATE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.AUTHENTICATION_ERROR: 401,
    ErrorKind.AUTHORIZATION_ERROR: 403,
    ErrorKind.NOT_FOUND_ERROR: 404,
    ErrorKind.DUPLICATE_ERROR: 409,
    ErrorKind.DATABASE_ERROR: 503,
    ErrorKind.INTERNAL_SERVER_ERROR: 500,
}

_KIND_BY_STATUS: Dict[int, ErrorKind] = {
    status: kind
    for kind, status in STATUS_BY_KIND.items()
    if kind is not ErrorKind.INTERNAL_SERVER_ERROR
}


def error_kind_for_status(status_code: int) -> ErrorKind:
    """Orice status necunoscut (inclusiv 5xx în afară de 503) devine INTERNAL_SERVER_ERROR."""
    return _KIND_BY_STATUS.get(status_code, ErrorKind.INTERNAL_SERVER_ERROR)


# -------------------------- Application errors --------------------------

class AppError(Exception):
    """Eroare operațională ridicată de servicii; tradusă de error handler în envelope-ul standard."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or error_kind_for_status(status_code).value
        self.details = details or []

    @property
    def kind(self) -> ErrorKind:
        return error_kind_for_status(self.status_code)


class ValidationError(AppError):
    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message, 400, details=details)


class NotFoundError(AppError):
    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found", 404)
        self.resource = resource


class DuplicateError(AppError):
    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"{field} '{value}' already exists", 409)
        self.field = field
        self.value = value


class DatabaseUnavailableError(AppError):
    def __init__(self, message: str = "Database connection failed") -> None:
        super().__init__(message, 503)


class InternalError(AppError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, 500)


# -------------------------- Store errors --------------------------

class StoreError(Exception):
    """Erori ridicate de stratul de persistență (modele / crud)."""


class StoreValidationError(StoreError):
    """Validatorii de câmp ai modelelor au eșuat; `violations` = [{field, message, value}]."""

    def __init__(self, violations: List[Dict[str, Any]]) -> None:
        fields = ", ".join(v["field"] for v in violations)
        super().__init__(f"Validation failed for: {fields}")
        self.violations = violations


class StoreCastError(StoreError):
    """Valoare care nu poate fi convertită la tipul coloanei (ex. id malformat)."""

    def __init__(self, field: str, value: Any, kind: str = "ObjectId") -> None:
        super().__init__(f"Cast to {kind} failed for value {value!r} at path {field!r}")
        self.field = field
        self.value = value
        self.kind = kind


class DuplicateKeyError(StoreError):
    """Încălcare de index unic la nivel de store."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"Duplicate key for {field}: {value!r}")
        self.field = field
        self.value = value
