from __future__ import annotations

import copy
from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "src"))

from models.enums import RegistryStatus
from models.schemas import AssetHolding, AssetWeightUpdate, CallContext
from registry.errors import (
    AlreadyRegistered,
    InsufficientPayment,
    InvalidArgument,
    InvalidWeightSum,
    NotRegistered,
    Unauthorized,
)
from registry.weight_registry import (
    DEFAULT_REBALANCE_INTERVAL,
    MAX_IDENTIFIER_LENGTH,
    STORAGE_DEPOSIT_BYTES,
    WeightRegistry,
)

CURATOR = "curator.near"
OUTSIDER = "unauthorized.near"
BYTE_COST = 10**19


def _ctx(caller: str = CURATOR, deposit: int = 0, timestamp: int = 100) -> CallContext:
    return CallContext(
        caller_identity=caller,
        storage_byte_cost=BYTE_COST,
        block_timestamp=timestamp,
        attached_deposit=deposit,
    )


def _w(asset_id: str, weight: int) -> AssetWeightUpdate:
    return AssetWeightUpdate(asset_id=asset_id, weight=weight)


class TestConstruction(unittest.TestCase):
    def test_default_registry(self) -> None:
        registry = WeightRegistry.create_default()
        self.assertIsNone(registry.controller)
        self.assertEqual(registry.last_rebalance, 0)
        self.assertEqual(registry.rebalance_interval, DEFAULT_REBALANCE_INTERVAL)
        self.assertEqual(registry.rebalance_interval, 86400)
        self.assertEqual(registry.status, RegistryStatus.NO_CONTROLLER)

    def test_create_with_interval_starts_empty(self) -> None:
        registry = WeightRegistry.create(86400)
        self.assertEqual(registry.get_assets(), [])
        self.assertEqual(registry.get_weights(), [])

        custom = WeightRegistry.create(3600)
        self.assertEqual(custom.rebalance_interval, 3600)
        self.assertIsNone(custom.controller)

    def test_create_rejects_invalid_interval(self) -> None:
        for interval in (0, -1, 1.5, "3600", True):
            with self.subTest(interval=interval):
                with self.assertRaises(InvalidArgument) as ctx:
                    WeightRegistry.create(interval)
                self.assertIn("Invalid rebalance interval", str(ctx.exception))

    def test_invalid_argument_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            WeightRegistry.create(0)


class TestRegisterController(unittest.TestCase):
    def test_register_with_exact_threshold(self) -> None:
        registry = WeightRegistry.create_default()
        registry.register_controller(CURATOR, _ctx(deposit=BYTE_COST * STORAGE_DEPOSIT_BYTES))
        self.assertEqual(registry.get_controller(), CURATOR)
        self.assertEqual(registry.status, RegistryStatus.CONTROLLED)

    def test_insufficient_deposit_is_rejected(self) -> None:
        registry = WeightRegistry.create_default()
        with self.assertRaises(InsufficientPayment):
            registry.register_controller(CURATOR, _ctx(deposit=BYTE_COST * STORAGE_DEPOSIT_BYTES - 1))
        self.assertIsNone(registry.controller)

    def test_controller_identity_length_is_capped(self) -> None:
        registry = WeightRegistry.create_default()
        with self.assertRaises(InvalidArgument):
            registry.register_controller("c" * (MAX_IDENTIFIER_LENGTH + 1), _ctx(deposit=10**24))
        self.assertIsNone(registry.controller)

        longest = "c" * MAX_IDENTIFIER_LENGTH
        registry.register_controller(longest, _ctx(deposit=10**24))
        self.assertEqual(registry.controller, longest)

    def test_second_registration_fails_regardless_of_payment(self) -> None:
        registry = WeightRegistry.create_default()
        registry.register_controller(CURATOR, _ctx(deposit=10**24))

        for deposit in (0, 10**24):
            with self.subTest(deposit=deposit):
                with self.assertRaises(AlreadyRegistered):
                    registry.register_controller(OUTSIDER, _ctx(caller=OUTSIDER, deposit=deposit))
        self.assertEqual(registry.controller, CURATOR)


class TestUpdateWeights(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = WeightRegistry.create_default()
        self.registry.register_controller(CURATOR, _ctx(deposit=10**24))

    def test_update_weights(self) -> None:
        self.registry.update_weights([_w("asset1.near", 6000), _w("asset2.near", 4000)], _ctx())

        weights = {w.asset_id: w.weight for w in self.registry.get_weights()}
        self.assertEqual(weights, {"asset1.near": 6000, "asset2.near": 4000})
        self.assertEqual(sorted(self.registry.get_assets()), ["asset1.near", "asset2.near"])

    def test_new_assets_start_with_zero_balance_and_price(self) -> None:
        self.registry.update_weights([_w("asset.near", 10000)], _ctx(timestamp=42))

        holding = self.registry.get_holding("asset.near")
        self.assertEqual(holding, AssetHolding(balance=0, weight=10000, last_price=0, last_updated=42))

    def test_existing_holding_keeps_balance_and_price(self) -> None:
        self.registry.update_weights([_w("a.near", 6000), _w("b.near", 4000)], _ctx(timestamp=1))
        self.registry.assets["a.near"].balance = 500
        self.registry.assets["a.near"].last_price = 7

        self.registry.update_weights([_w("a.near", 3000), _w("b.near", 7000)], _ctx(timestamp=2))

        holding = self.registry.get_holding("a.near")
        self.assertEqual(holding.weight, 3000)
        self.assertEqual(holding.balance, 500)
        self.assertEqual(holding.last_price, 7)
        self.assertEqual(holding.last_updated, 2)

    def test_without_controller_fails_not_registered(self) -> None:
        registry = WeightRegistry.create_default()
        with self.assertRaises(NotRegistered) as ctx:
            registry.update_weights([_w("asset.near", 10000)], _ctx())
        self.assertIn("curator not registered", str(ctx.exception))
        self.assertEqual(registry.get_weights(), [])

    def test_unauthorized_caller_makes_no_change(self) -> None:
        with self.assertRaises(Unauthorized):
            self.registry.update_weights([_w("asset.near", 10000)], _ctx(caller=OUTSIDER))
        self.assertEqual(self.registry.get_assets(), [])

    def test_partial_sum_is_rejected(self) -> None:
        with self.assertRaises(InvalidWeightSum) as ctx:
            self.registry.update_weights([_w("asset.near", 5000)], _ctx())
        self.assertIn("Final weights must sum to 100%", str(ctx.exception))
        self.assertEqual(self.registry.get_weights(), [])

    def test_sum_includes_assets_outside_the_batch(self) -> None:
        self.registry.update_weights([_w("A", 6000), _w("B", 4000)], _ctx(timestamp=1))
        before = copy.deepcopy(self.registry.assets)

        with self.assertRaises(InvalidWeightSum):
            self.registry.update_weights([_w("A", 3000)], _ctx(timestamp=2))

        self.assertEqual(self.registry.assets, before)
        self.assertEqual({w.asset_id: w.weight for w in self.registry.get_weights()}, {"A": 6000, "B": 4000})

    def test_new_asset_must_fit_with_existing_ones(self) -> None:
        self.registry.update_weights([_w("A", 6000), _w("B", 4000)], _ctx())

        with self.assertRaises(InvalidWeightSum):
            self.registry.update_weights([_w("C", 1000)], _ctx())
        self.registry.update_weights([_w("A", 5000), _w("C", 1000)], _ctx())

        weights = {w.asset_id: w.weight for w in self.registry.get_weights()}
        self.assertEqual(weights, {"A": 5000, "B": 4000, "C": 1000})
        self.assertEqual(sum(weights.values()), 10000)

    def test_duplicate_assets_in_batch_last_write_wins(self) -> None:
        self.registry.update_weights([_w("A", 2000), _w("B", 4000), _w("A", 6000)], _ctx())
        weights = {w.asset_id: w.weight for w in self.registry.get_weights()}
        self.assertEqual(weights, {"A": 6000, "B": 4000})

    def test_asset_can_be_zeroed_but_is_kept(self) -> None:
        self.registry.update_weights([_w("A", 6000), _w("B", 4000)], _ctx())
        self.registry.update_weights([_w("A", 0), _w("B", 10000)], _ctx())
        self.assertEqual(sorted(self.registry.get_assets()), ["A", "B"])
        self.assertEqual(self.registry.get_holding("A").weight, 0)

    def test_sum_holds_after_every_accepted_batch(self) -> None:
        batches = [
            [_w("A", 10000)],
            [_w("A", 2500), _w("B", 7500)],
            [_w("B", 2500), _w("C", 5000)],
            [_w("C", 0), _w("A", 5000), _w("D", 2500)],
        ]
        for batch in batches:
            self.registry.update_weights(batch, _ctx())
            self.assertEqual(sum(w.weight for w in self.registry.get_weights()), 10000)

    def test_out_of_range_weights_are_invalid_arguments(self) -> None:
        for batch in ([_w("A", -5000), _w("B", 15000)], [_w("A", 10001)], [_w("A", True)]):
            with self.subTest(batch=batch):
                with self.assertRaises(InvalidArgument):
                    self.registry.update_weights(batch, _ctx())
        self.assertEqual(self.registry.get_assets(), [])

    def test_blank_asset_identifier_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgument):
            self.registry.update_weights([_w(" ", 10000)], _ctx())

    def test_asset_identifier_length_is_capped(self) -> None:
        with self.assertRaises(InvalidArgument):
            self.registry.update_weights([_w("a" * (MAX_IDENTIFIER_LENGTH + 1), 10000)], _ctx())
        self.assertEqual(self.registry.get_assets(), [])

        longest = "a" * MAX_IDENTIFIER_LENGTH
        self.registry.update_weights([_w(longest, 10000)], _ctx())
        self.assertEqual(self.registry.get_assets(), [longest])

    def test_empty_batch_on_full_portfolio_is_a_no_op(self) -> None:
        self.registry.update_weights([_w("A", 10000)], _ctx(timestamp=1))
        self.registry.update_weights([], _ctx(timestamp=2))
        self.assertEqual(self.registry.get_holding("A").last_updated, 1)

    def test_empty_batch_on_empty_portfolio_fails(self) -> None:
        with self.assertRaises(InvalidWeightSum):
            self.registry.update_weights([], _ctx())

    def test_reads_are_stable_for_a_given_state(self) -> None:
        self.registry.update_weights([_w("B", 4000), _w("A", 6000)], _ctx())
        self.assertEqual(self.registry.get_assets(), self.registry.get_assets())
        self.assertEqual([w.asset_id for w in self.registry.get_weights()], self.registry.get_assets())


if __name__ == "__main__":
    unittest.main()
