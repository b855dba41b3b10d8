# catalog_api/schemas/common.py
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, AnyUrl, BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from catalog_api.core.ids import is_valid_object_id

_DIGITS_RE = re.compile(r"^\d+$")
_url_adapter = TypeAdapter(AnyUrl)

T = TypeVar("T")


def strip_name(v: str) -> str:
    # doar capetele; spațiile interne fac parte din nume (unicitate, fingerprint)
    return v.strip()


def _object_id(v: str) -> str:
    if not is_valid_object_id(v):
        raise PydanticCustomError("object_id", "Invalid ObjectId format")
    return v.lower()


def _url(v: str) -> str:
    # validăm ca URL, dar păstrăm string-ul original (fără normalizări de tip trailing slash)
    try:
        _url_adapter.validate_python(v)
    except PydanticValidationError:
        raise PydanticCustomError("url", "Image must be a valid URL") from None
    return v


def _digits(label: str):
    def _check(v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return v
        if isinstance(v, str) and _DIGITS_RE.fullmatch(v):
            return int(v)
        raise PydanticCustomError("digits", f"{label} must be a positive number")
    return _check


def iso_utc(dt: datetime) -> str:
    """ISO-8601 UTC cu milisecunde și sufix `Z` (SQLite întoarce datetime naive → considerat UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


ObjectIdStr = Annotated[str, AfterValidator(_object_id)]
UrlStr = Annotated[str, AfterValidator(_url)]
PageInt = Annotated[int, BeforeValidator(_digits("Page")), Field(ge=1)]
LimitInt = Annotated[int, BeforeValidator(_digits("Limit")), Field(ge=1)]


class CamelModel(BaseModel):
    """Model de bază: snake_case în Python, camelCase pe fir."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# -------------------------- Envelopes --------------------------

class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    limit: int
    has_next_page: bool
    has_prev_page: bool


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class PagedResponse(CamelModel, Generic[T]):
    success: bool = True
    message: str
    data: List[T]
    pagination: PaginationMeta


class ErrorDetail(BaseModel):
    field: str
    message: str
    code: Optional[str] = None
    value: Optional[Any] = None


class ErrorBody(BaseModel):
    type: str
    message: str
    code: Optional[str] = None
    details: Optional[List[ErrorDetail]] = None
    stack: Optional[str] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorBody
    timestamp: str
    path: str
    method: str
