"""Turn CLI arguments and CSV frames into weight update batches."""

from __future__ import annotations

import pandas as pd

from models.schemas import AssetWeightUpdate
from utils.validation import require_columns, require_integer_column


def parse_weight_pair(raw: str) -> AssetWeightUpdate:
    """Parse 'asset1.near=6000' into an update; the weight is in basis points."""
    asset_id, sep, weight_text = raw.rpartition("=")
    asset_id = asset_id.strip()
    if not sep or not asset_id:
        raise ValueError(f"Expected ASSET_ID=WEIGHT_BPS, got: {raw!r}")
    try:
        weight = int(weight_text.strip())
    except ValueError as exc:
        raise ValueError(f"Weight must be an integer number of basis points, got: {weight_text!r}") from exc
    return AssetWeightUpdate(asset_id=asset_id, weight=weight)


def parse_weight_pairs(raw_pairs: list[str]) -> list[AssetWeightUpdate]:
    return [parse_weight_pair(raw) for raw in raw_pairs]


def updates_from_frame(df: pd.DataFrame) -> list[AssetWeightUpdate]:
    """Build a batch from a frame with asset_id and weight columns, keeping row order."""
    require_columns(df, {"asset_id", "weight"})
    if df.empty:
        return []
    asset_ids = df["asset_id"].fillna("").astype(str).str.strip()
    weights = require_integer_column(df, "weight")
    return [
        AssetWeightUpdate(asset_id=asset_id, weight=int(weight))
        for asset_id, weight in zip(asset_ids, weights)
    ]


def read_weights_csv(path: str) -> list[AssetWeightUpdate]:
    return updates_from_frame(pd.read_csv(path, dtype={"asset_id": str}))


def weights_frame(updates: list[AssetWeightUpdate]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [{"asset_id": update.asset_id, "weight": update.weight} for update in updates],
        columns=["asset_id", "weight"],
    )
    frame["weight_pct"] = frame["weight"] / 100.0
    return frame
