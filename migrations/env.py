# migrations/env.py
"""
Mediul Alembic pentru catalog: URL-ul DB vine din `Settings` (DATABASE_URL / .env),
cu fallback pe `sqlalchemy.url` din alembic.ini; metadata = `Base.metadata` al modelelor.
"""
from __future__ import annotations

import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from catalog_api.core.settings import Settings
from catalog_api.database import Base, mask_url
import catalog_api.models.category  # noqa: F401  (înregistrează tabelele)
import catalog_api.models.product  # noqa: F401

alembic_cfg = context.config
if alembic_cfg.config_file_name:
    fileConfig(alembic_cfg.config_file_name)
log = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def _database_url() -> str:
    settings = Settings()
    if "database_url" not in settings.model_fields_set:
        ini_url = (alembic_cfg.get_main_option("sqlalchemy.url") or "").strip()
        if ini_url:
            return ini_url
    return settings.database_url


def _common_options(url: str) -> dict:
    # SQLite nu are ALTER complet → batch mode; restul dialectelor migrează direct
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def migrate_offline(url: str) -> None:
    """Generează SQL (alembic upgrade --sql), fără conexiune."""
    context.configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"}, **_common_options(url))
    with context.begin_transaction():
        context.run_migrations()


def migrate_online(url: str) -> None:
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **_common_options(url))
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


_url = _database_url()
log.info("[alembic] %s url=%s", "offline" if context.is_offline_mode() else "online", mask_url(_url))
if context.is_offline_mode():
    migrate_offline(_url)
else:
    migrate_online(_url)
