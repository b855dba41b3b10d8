from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = Field("catalog-api")
    app_version: str = Field("1.0.0")
    app_env: str = Field("development", description="development|test|production")
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # DB
    database_url: str = Field("sqlite:///./catalog.db", description="postgresql+psycopg://user:<PASS>@db:5432/catalog")
    db_echo: bool = False
    db_create_all: bool = False
    db_search_path: str = ""
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    # HTTP
    cors_origins: str = ""
    max_body_size_bytes: int = 10 * 1024 * 1024

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
