"""Create SQLAlchemy engines for the registry database."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from config.settings import DatabaseConfig, Settings, settings


def _mysql_url(host: str, port: int, user: str, password: str, name: str) -> str:
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"


def _engine(db_config: DatabaseConfig) -> Engine:
    return create_engine(
        _mysql_url(
            db_config.host,
            db_config.port,
            db_config.user,
            db_config.password,
            db_config.name,
        ),
        pool_pre_ping=True,
    )


def create_registry_engine(config: Settings = settings) -> Engine:
    # REGISTRY_DB_URL wins over the MySQL parts, e.g. sqlite:///registry.db for local runs.
    if config.registry_db_url:
        return create_engine(config.registry_db_url, pool_pre_ping=True)
    return _engine(config.registry_db)
