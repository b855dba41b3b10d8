# tests/utils.py
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

import httpx

OBJECT_ID_MISSING = "0123456789abcdef01234567"
IMAGE_URL = "https://cdn.example.com/img/item.png"


# --- Utilitare ----------------------------------------------------------------
def _dump_response(r: httpx.Response) -> str:
    """Diagnostic compact pentru mesaje de aserție."""
    try:
        j = r.json()
    except Exception:
        j = None
    snippet = (r.text or "")[:500].replace("\n", "\\n")
    return (
        f"status={r.status_code} {r.request.method} {r.request.url} "
        f"json={j!r} text='{snippet}...'"
    )


def _assert_status(r: httpx.Response, expected: int | tuple[int, ...]):
    if isinstance(expected, int):
        ok = r.status_code == expected
        exp_str = str(expected)
    else:
        ok = r.status_code in expected
        exp_str = "|".join(map(str, expected))
    assert ok, f"expected {exp_str} but got: {_dump_response(r)}"


def _error(r: httpx.Response, status: int, kind: str) -> Dict[str, Any]:
    """Verifică envelope-ul de eroare și întoarce `error`."""
    _assert_status(r, status)
    body = r.json()
    assert body["success"] is False, body
    assert body["error"]["type"] == kind, body
    assert body["path"] == r.request.url.path, body
    assert body["method"] == r.request.method, body
    assert body["timestamp"].endswith("Z"), body
    return body["error"]


def _detail_fields(error: Dict[str, Any]) -> set[str]:
    return {d["field"] for d in error.get("details") or []}


def _uniq(prefix: str) -> str:
    return f"{prefix} {uuid.uuid4().hex[:6]}"


# --- Helper-e API -------------------------------------------------------------
def create_category(c: httpx.Client, name: Optional[str] = None, description: str | None = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"name": name or _uniq("Category")}
    if description is not None:
        payload["description"] = description
    r = c.post("/category", json=payload)
    _assert_status(r, 201)
    j = r.json()
    assert j["success"] is True, j
    assert j["message"] == "Category created successfully", j
    return j["data"]


def product_payload(category_id: str, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": _uniq("Product"),
        "description": "A perfectly ordinary product",
        "price": 100,
        "image": IMAGE_URL,
        "categoryId": category_id,
    }
    payload.update(overrides)
    return payload


def create_product(c: httpx.Client, category_id: str, **overrides: Any) -> Dict[str, Any]:
    r = c.post("/product", json=product_payload(category_id, **overrides))
    _assert_status(r, 201)
    j = r.json()
    assert j["message"] == "Product created successfully", j
    return j["data"]
