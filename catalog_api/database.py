# catalog_api/database.py
from __future__ import annotations

import logging
import re
from typing import Generator, List

from fastapi import Request
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from catalog_api.core.settings import Settings

logger = logging.getLogger(__name__)

# -----------------------------
# Helpers
# -----------------------------
def mask_url(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" not in rest or ":" not in rest.split("@", 1)[0]:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

def _sanitize_search_path(raw: str) -> str:
    """
    Acceptă doar identificatori ne-citați separați prin virgulă (ex. 'catalog,public').
    Dacă nu trece validarea, întoarce "" (nu setăm search_path).
    """
    parts = [p.strip() for p in (raw or "").split(",") if p.strip()]
    if not all(_IDENT_RE.fullmatch(p) for p in parts):
        logger.warning("Invalid DB_SEARCH_PATH %r ignored", raw)
        return ""
    # elimină duplicate păstrând ordinea
    uniq: List[str] = []
    for p in parts:
        if p not in uniq:
            uniq.append(p)
    return ",".join(uniq)

# -----------------------------
# Naming convention pentru Alembic/op.f()
# -----------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)

# -----------------------------
# Engine factory
# -----------------------------
def _build_engine_kwargs(settings: Settings) -> dict:
    url = settings.database_url
    kwargs: dict = {"echo": settings.db_echo, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        # SQLite: single-thread în driver → dezactivează check_same_thread
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory → StaticPool (altfel fiecare conexiune are DB separat)
        if url in {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
        return kwargs

    kwargs.update(
        {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_recycle": settings.db_pool_recycle,
            "pool_timeout": settings.db_pool_timeout,
        }
    )
    # Postgres: search_path prin libpq options (nu ca statement)
    search_path = _sanitize_search_path(settings.db_search_path)
    if search_path:
        kwargs["connect_args"] = {"options": f"-c search_path={search_path}"}
    return kwargs


def build_engine(settings: Settings) -> Engine:
    logger.info("Creating engine for %s", mask_url(settings.database_url))
    return create_engine(settings.database_url, **_build_engine_kwargs(settings))


def build_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False → obiectele rămân utilizabile după commit
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def create_all(engine: Engine) -> None:
    """Creează tabelele din modele (dev/teste); în producție folosește Alembic."""
    from catalog_api.models import category, product  # noqa: F401

    Base.metadata.create_all(bind=engine)

# -----------------------------
# Sessions
# -----------------------------
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency: o sesiune per request, din factory-ul atașat pe app.state.
    Face rollback automat dacă apare o excepție în handler.
    """
    db: Session = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "create_all",
    "get_db",
]
