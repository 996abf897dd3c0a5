"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

# NEAR-style storage price: 10^19 yocto per byte.
DEFAULT_STORAGE_BYTE_COST = 10**19


@dataclass(frozen=True)
class DatabaseConfig:
    host: str
    port: int
    user: str
    password: str
    name: str


@dataclass(frozen=True)
class Settings:
    app_env: str
    log_level: str
    registry_db: DatabaseConfig
    registry_db_url: str | None
    registry_id: str
    storage_byte_cost: int


def _db(server_prefix: str, default_port: int, name_env: str, default_name: str) -> DatabaseConfig:
    return DatabaseConfig(
        host=os.getenv(f"{server_prefix}_HOST", "127.0.0.1"),
        port=int(os.getenv(f"{server_prefix}_PORT", str(default_port))),
        user=os.getenv(f"{server_prefix}_USER", "root"),
        password=os.getenv(f"{server_prefix}_PASSWORD", ""),
        name=os.getenv(name_env, default_name),
    )


def get_settings() -> Settings:
    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        registry_db=_db("REGISTRY_DB", 3306, "REGISTRY_DB_NAME", "index_fund_registry"),
        registry_db_url=os.getenv("REGISTRY_DB_URL") or None,
        registry_id=os.getenv("REGISTRY_ID", "default"),
        storage_byte_cost=int(os.getenv("STORAGE_BYTE_COST", str(DEFAULT_STORAGE_BYTE_COST))),
    )


settings = get_settings()
