"""Persist registry state to the registry database and read it back.

Writes are optimistic: each state row carries a version, and a save only lands
if the row still holds the version that was read in the same transaction. A
second writer that read the same version gets ConcurrentModification instead of
silently replacing the first writer's state.
"""

from __future__ import annotations

import pandas as pd
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from models.schemas import AssetHolding
from registry.errors import ConcurrentModification
from registry.weight_registry import WeightRegistry
from utils.validation import require_columns

STATE_TABLE = "registry_state"
ASSETS_TABLE = "registry_assets"
STATE_COLUMNS = {"registry_id", "controller", "last_rebalance", "rebalance_interval", "version"}
ASSET_COLUMNS = ["registry_id", "asset_id", "position", "balance", "weight", "last_price", "last_updated"]


def tables_exist(bind: Engine | Connection) -> bool:
    existing = set(inspect(bind).get_table_names())
    return STATE_TABLE in existing and ASSETS_TABLE in existing


def _read_registry(conn: Connection, registry_id: str, for_update: bool) -> tuple[WeightRegistry | None, int]:
    params = {"registry_id": registry_id}
    state_sql = f"SELECT * FROM {STATE_TABLE} WHERE registry_id = :registry_id"
    # SQLite has no row locks; the version check in save_registry still applies.
    if for_update and conn.dialect.name != "sqlite":
        state_sql += " FOR UPDATE"

    state_df = pd.read_sql(text(state_sql), conn, params=params)
    if state_df.empty:
        return None, 0
    assets_df = pd.read_sql(
        text(f"SELECT * FROM {ASSETS_TABLE} WHERE registry_id = :registry_id ORDER BY position"),
        conn,
        params=params,
    )

    require_columns(state_df, STATE_COLUMNS)
    require_columns(assets_df, set(ASSET_COLUMNS))

    state = state_df.iloc[0]
    controller = None if pd.isna(state["controller"]) else str(state["controller"])
    assets = {
        str(row.asset_id): AssetHolding(
            balance=int(str(row.balance)),
            weight=int(row.weight),
            last_price=int(str(row.last_price)),
            last_updated=int(row.last_updated),
        )
        for row in assets_df.itertuples(index=False)
    }
    registry = WeightRegistry(
        controller=controller,
        assets=assets,
        last_rebalance=int(state["last_rebalance"]),
        rebalance_interval=int(state["rebalance_interval"]),
    )
    return registry, int(state["version"])


def load_registry(engine: Engine, registry_id: str) -> WeightRegistry | None:
    """Return the stored registry, or None when nothing was saved under registry_id."""
    if not tables_exist(engine):
        return None
    with engine.connect() as conn:
        registry, _ = _read_registry(conn, registry_id, for_update=False)
    return registry


def load_registry_for_update(conn: Connection, registry_id: str) -> tuple[WeightRegistry | None, int]:
    """Read state inside the caller's transaction; version 0 means no row yet."""
    return _read_registry(conn, registry_id, for_update=True)


def _assets_frame(registry_id: str, registry: WeightRegistry) -> pd.DataFrame:
    rows = [
        {
            "registry_id": registry_id,
            "asset_id": asset_id,
            "position": position,
            "balance": str(holding.balance),
            "weight": holding.weight,
            "last_price": str(holding.last_price),
            "last_updated": holding.last_updated,
        }
        for position, (asset_id, holding) in enumerate(registry.assets.items())
    ]
    return pd.DataFrame(rows, columns=ASSET_COLUMNS)


def _write_state(conn: Connection, registry_id: str, registry: WeightRegistry, expected_version: int) -> None:
    params = {
        "registry_id": registry_id,
        "controller": registry.controller,
        "last_rebalance": registry.last_rebalance,
        "rebalance_interval": registry.rebalance_interval,
        "expected_version": expected_version,
        "version": expected_version + 1,
    }
    if expected_version == 0:
        try:
            conn.execute(
                text(
                    f"""
                    INSERT INTO {STATE_TABLE}
                      (registry_id, controller, last_rebalance, rebalance_interval, version)
                    VALUES (:registry_id, :controller, :last_rebalance, :rebalance_interval, :version)
                    """
                ),
                params,
            )
        except IntegrityError as exc:
            raise ConcurrentModification(f"registry {registry_id} was created by another call") from exc
        return

    result = conn.execute(
        text(
            f"""
            UPDATE {STATE_TABLE}
            SET controller = :controller,
                last_rebalance = :last_rebalance,
                rebalance_interval = :rebalance_interval,
                version = :version
            WHERE registry_id = :registry_id AND version = :expected_version
            """
        ),
        params,
    )
    if result.rowcount != 1:
        raise ConcurrentModification(f"registry {registry_id} changed since version {expected_version}")


def save_registry(conn: Connection, registry_id: str, registry: WeightRegistry, expected_version: int) -> int:
    """Write registry state inside the caller's transaction; returns asset rows written."""
    _write_state(conn, registry_id, registry, expected_version)
    conn.execute(
        text(f"DELETE FROM {ASSETS_TABLE} WHERE registry_id = :registry_id"),
        {"registry_id": registry_id},
    )
    assets_df = _assets_frame(registry_id, registry)
    if not assets_df.empty:
        assets_df.to_sql(ASSETS_TABLE, conn, if_exists="append", index=False, method="multi")
    return len(assets_df)
