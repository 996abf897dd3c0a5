"""Schema for per-asset holding records."""

from dataclasses import dataclass


@dataclass(slots=True)
class AssetHolding:
    balance: int
    weight: int
    last_price: int
    last_updated: int
