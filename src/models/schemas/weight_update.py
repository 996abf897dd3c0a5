"""Schema for a single asset weight in basis points (5000 = 50%)."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AssetWeightUpdate:
    asset_id: str
    weight: int
