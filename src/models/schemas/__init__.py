"""Schema objects for core entities."""

from .asset_holding import AssetHolding
from .call_context import CallContext
from .weight_update import AssetWeightUpdate

__all__ = ["AssetHolding", "AssetWeightUpdate", "CallContext"]
