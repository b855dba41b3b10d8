# tests/conftest.py
from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog_api.core.settings import Settings
from catalog_api.main import create_app


def make_settings(**overrides) -> Settings:
    # in-memory SQLite (StaticPool) + tabele create la startup
    values = dict(database_url="sqlite://", db_create_all=True, app_env="test", log_level="WARNING")
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


# --- Fixură client ------------------------------------------------------------
@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    """Client per test, cu DB proaspăt (lifespan rulează create_all)."""
    with TestClient(app) as c:
        yield c
