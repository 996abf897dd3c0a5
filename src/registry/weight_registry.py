"""Weight registry: a controller-owned portfolio whose weights always sum to 100%.

Weights are integer basis points (10000 = 100%). A controller ("curator") is
registered once; afterwards only that identity may submit weight batches. Each
batch is merged into a snapshot of the current weights and checked before any
holding is touched, so a call either commits completely or not at all.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from models.enums import RegistryStatus
from models.schemas import AssetHolding, AssetWeightUpdate, CallContext

from .errors import (
    AlreadyRegistered,
    InsufficientPayment,
    InvalidArgument,
    InvalidWeightSum,
    NotRegistered,
    Unauthorized,
)

TOTAL_WEIGHT_BPS = 10_000
MAX_WEIGHT_BPS = TOTAL_WEIGHT_BPS
# ~1 day assuming one block per second.
DEFAULT_REBALANCE_INTERVAL = 86_400
STORAGE_DEPOSIT_BYTES = 100
# NEAR account ids are 2..64 characters; storage columns are sized above this.
MAX_IDENTIFIER_LENGTH = 64


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_identifier(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip()) and len(value) <= MAX_IDENTIFIER_LENGTH


@dataclass
class WeightRegistry:
    controller: str | None = None
    assets: dict[str, AssetHolding] = field(default_factory=dict)
    last_rebalance: int = 0
    rebalance_interval: int = DEFAULT_REBALANCE_INTERVAL

    @classmethod
    def create_default(cls) -> WeightRegistry:
        return cls()

    @classmethod
    def create(cls, rebalance_interval: int) -> WeightRegistry:
        if not _is_int(rebalance_interval) or rebalance_interval <= 0:
            raise InvalidArgument("Invalid rebalance interval")
        return cls(rebalance_interval=rebalance_interval)

    @property
    def status(self) -> RegistryStatus:
        if self.controller is None:
            return RegistryStatus.NO_CONTROLLER
        return RegistryStatus.CONTROLLED

    def register_controller(self, candidate_identity: str, context: CallContext) -> None:
        if self.controller is not None:
            raise AlreadyRegistered()
        if not _is_identifier(candidate_identity):
            raise InvalidArgument(f"Invalid controller identity: {candidate_identity!r}")
        required = context.storage_byte_cost * STORAGE_DEPOSIT_BYTES
        if context.attached_deposit < required:
            raise InsufficientPayment(
                f"Insufficient storage deposit: attached {context.attached_deposit}, required {required}"
            )
        self.controller = candidate_identity

    def update_weights(self, updates: Iterable[AssetWeightUpdate], context: CallContext) -> None:
        if self.controller is None:
            raise NotRegistered()
        if context.caller_identity != self.controller:
            raise Unauthorized()

        batch = list(updates)
        for update in batch:
            _check_update(update)

        # Validation works on a copy; persisted holdings are untouched until it passes.
        snapshot = {asset_id: holding.weight for asset_id, holding in self.assets.items()}
        for update in batch:
            snapshot[update.asset_id] = update.weight

        total_weight = sum(snapshot.values())
        if total_weight != TOTAL_WEIGHT_BPS:
            raise InvalidWeightSum(f"Final weights must sum to 100% (got {total_weight} bps)")

        for update in batch:
            holding = self.assets.get(update.asset_id)
            if holding is None:
                self.assets[update.asset_id] = AssetHolding(
                    balance=0,
                    weight=update.weight,
                    last_price=0,
                    last_updated=context.block_timestamp,
                )
            else:
                holding.weight = update.weight
                holding.last_updated = context.block_timestamp

    def get_weights(self) -> list[AssetWeightUpdate]:
        return [
            AssetWeightUpdate(asset_id=asset_id, weight=holding.weight)
            for asset_id, holding in self.assets.items()
        ]

    def get_assets(self) -> list[str]:
        return list(self.assets)

    def get_controller(self) -> str | None:
        return self.controller

    def get_holding(self, asset_id: str) -> AssetHolding | None:
        return self.assets.get(asset_id)


def _check_update(update: AssetWeightUpdate) -> None:
    if not _is_identifier(update.asset_id):
        raise InvalidArgument(f"Invalid asset identifier: {update.asset_id!r}")
    if not _is_int(update.weight) or not 0 <= update.weight <= MAX_WEIGHT_BPS:
        raise InvalidArgument(f"Weight for {update.asset_id} must be an integer in [0, {MAX_WEIGHT_BPS}]")
