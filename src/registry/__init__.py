"""Weight registry core: state object, transitions, and error taxonomy."""

from .errors import (
    AlreadyInitialized,
    ConcurrentModification,
    AlreadyRegistered,
    InsufficientPayment,
    InvalidArgument,
    InvalidWeightSum,
    NotRegistered,
    RegistryError,
    Unauthorized,
)
from .weight_registry import (
    DEFAULT_REBALANCE_INTERVAL,
    MAX_WEIGHT_BPS,
    STORAGE_DEPOSIT_BYTES,
    TOTAL_WEIGHT_BPS,
    WeightRegistry,
)

__all__ = [
    "WeightRegistry",
    "DEFAULT_REBALANCE_INTERVAL",
    "MAX_WEIGHT_BPS",
    "STORAGE_DEPOSIT_BYTES",
    "TOTAL_WEIGHT_BPS",
    "RegistryError",
    "InvalidArgument",
    "AlreadyInitialized",
    "ConcurrentModification",
    "AlreadyRegistered",
    "InsufficientPayment",
    "NotRegistered",
    "Unauthorized",
    "InvalidWeightSum",
]
