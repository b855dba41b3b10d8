# tests/test_health.py
from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from catalog_api.main import create_app
from tests.conftest import make_settings
from tests.utils import _assert_status, _dump_response, _error

# Latență maximă acceptată pentru /health (secunde)
MAX_HEALTH_LATENCY = 1.5


@pytest.mark.timeout(5)
def test_health_ok(client: TestClient):
    t0 = time.perf_counter()
    r = client.get("/health")
    dt = time.perf_counter() - t0

    assert r.status_code == 200, _dump_response(r)
    assert dt <= MAX_HEALTH_LATENCY, f"/health too slow: {dt:.3f}s > {MAX_HEALTH_LATENCY:.3f}s"
    body = r.json()
    assert body["status"] == "UP", body
    assert body["message"] == "Service is running smoothly", body
    assert body["environment"] == "test", body
    assert body["version"] == "1.0.0", body
    assert body["timestamp"].endswith("Z"), body


@pytest.mark.timeout(5)
def test_health_headers(client: TestClient):
    r = client.get("/health", headers={"X-Request-ID": "req-abc"})
    _assert_status(r, 200)
    assert r.headers["X-Request-ID"] == "req-abc"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-App-Version"] == "1.0.0"
    assert "X-Process-Time" in r.headers


@pytest.mark.timeout(5)
def test_health_db(client: TestClient):
    r = client.get("/health/db")
    _assert_status(r, 200)
    assert r.json() == {"status": "ok", "db": "up", "dialect": "sqlite"}


@pytest.mark.timeout(5)
def test_migrations_endpoint_without_alembic(client: TestClient):
    """create_all nu creează alembic_version → present=False."""
    r = client.get("/health/migrations")
    _assert_status(r, 200)
    body = r.json()
    assert body == {"alembicVersion": None, "present": False}, body


@pytest.mark.timeout(5)
def test_unknown_route_is_404_envelope(client: TestClient):
    r = client.get("/nope", params={"x": "1"})
    err = _error(r, 404, "NOT_FOUND_ERROR")
    assert err["message"] == "Route /nope?x=1 not found", err


@pytest.mark.timeout(5)
def test_unmatched_method_is_404_envelope(client: TestClient):
    r = client.patch("/category")
    err = _error(r, 404, "NOT_FOUND_ERROR")
    assert err["message"] == "Route /category not found", err


@pytest.mark.timeout(5)
def test_body_too_large_is_rejected():
    app = create_app(make_settings(max_body_size_bytes=64))
    with TestClient(app) as c:
        r = c.post("/category", json={"name": "x" * 200})
        err = _error(r, 413, "INTERNAL_SERVER_ERROR")
        assert err["message"] == "Payload too large", err
