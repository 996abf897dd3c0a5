"""Run plain .sql DDL files statement by statement."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import Engine

# Shipped as package data next to this module.
SQL_DIR = Path(__file__).resolve().parent / "sql"
SQL_REGISTRY_TABLES = SQL_DIR / "10_registry_tables.sql"


def split_sql_statements(sql_text: str) -> list[str]:
    statements: list[str] = []
    buffer: list[str] = []
    for line in sql_text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        buffer.append(line)
        if stripped.endswith(";"):
            statement = "\n".join(buffer).strip()
            if statement:
                statements.append(statement)
            buffer = []
    tail = "\n".join(buffer).strip()
    if tail:
        statements.append(tail)
    return statements


def run_sql_file(engine: Engine, path: Path) -> None:
    sql_text = path.read_text(encoding="utf-8")
    statements = split_sql_statements(sql_text)
    with engine.begin() as conn:
        for statement in statements:
            conn.execute(text(statement))


def ensure_registry_tables(engine: Engine) -> None:
    run_sql_file(engine, SQL_REGISTRY_TABLES)
