"""Host-side dispatch for registry calls: load state, run the call, persist on success.

The registry core knows nothing about databases or clocks. This service plays
the hosting environment: it supplies the caller identity, attached deposit,
storage price and block timestamp for each call. Every mutating call reads,
runs and writes inside one transaction; if another call committed in between,
the write is refused and the whole call is replayed against the fresh state.
Read paths never create tables.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import logging
import time

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from config.settings import settings
from db.schema import ensure_registry_tables
from load.registry_store import load_registry, load_registry_for_update, save_registry
from models.schemas import AssetWeightUpdate, CallContext
from registry.errors import AlreadyInitialized, ConcurrentModification
from registry.weight_registry import WeightRegistry
from utils.hashing import state_fingerprint
from utils.retry import retry

logger = logging.getLogger(__name__)


def registry_state_dict(registry: WeightRegistry) -> dict[str, object]:
    return {
        "controller": registry.controller,
        "last_rebalance": registry.last_rebalance,
        "rebalance_interval": registry.rebalance_interval,
        "assets": [
            [asset_id, holding.balance, holding.weight, holding.last_price, holding.last_updated]
            for asset_id, holding in registry.assets.items()
        ],
    }


def registry_fingerprint(registry: WeightRegistry) -> str:
    return state_fingerprint(registry_state_dict(registry))


class RegistryService:
    def __init__(
        self,
        engine: Engine,
        registry_id: str = settings.registry_id,
        storage_byte_cost: int = settings.storage_byte_cost,
        clock: Callable[[], int] = time.time_ns,
        write_attempts: int = 3,
    ) -> None:
        self.engine = engine
        self.registry_id = registry_id
        self.storage_byte_cost = storage_byte_cost
        self.clock = clock
        self.write_attempts = write_attempts
        self._tables_ready = False

    def _context(self, caller_identity: str, attached_deposit: int = 0) -> CallContext:
        return CallContext(
            caller_identity=caller_identity,
            storage_byte_cost=self.storage_byte_cost,
            block_timestamp=self.clock(),
            attached_deposit=attached_deposit,
        )

    def load(self) -> WeightRegistry:
        """Stored registry, or the default one if this registry was never initialized."""
        registry = retry(lambda: load_registry(self.engine, self.registry_id))
        if registry is None:
            return WeightRegistry.create_default()
        return registry

    def _mutate(self, call: Callable[[WeightRegistry | None], WeightRegistry]) -> WeightRegistry:
        """Run call on the stored state and save its result in the same transaction."""
        if not self._tables_ready:
            ensure_registry_tables(self.engine)
            self._tables_ready = True

        def attempt() -> WeightRegistry:
            with self.engine.begin() as conn:
                stored, version = load_registry_for_update(conn, self.registry_id)
                registry = call(stored)
                written = save_registry(conn, self.registry_id, registry, expected_version=version)
            logger.debug(
                "Saved registry=%s version=%d assets=%d fingerprint=%s",
                self.registry_id,
                version + 1,
                written,
                registry_fingerprint(registry),
            )
            return registry

        return retry(
            attempt,
            attempts=self.write_attempts,
            delay_seconds=0.05,
            retry_on=(ConcurrentModification, OperationalError),
        )

    def create(self, rebalance_interval: int) -> WeightRegistry:
        def call(stored: WeightRegistry | None) -> WeightRegistry:
            if stored is not None:
                raise AlreadyInitialized()
            return WeightRegistry.create(rebalance_interval)

        registry = self._mutate(call)
        logger.info("Initialized registry=%s rebalance_interval=%d", self.registry_id, rebalance_interval)
        return registry

    def register_controller(self, candidate_identity: str, caller_identity: str, attached_deposit: int) -> None:
        def call(stored: WeightRegistry | None) -> WeightRegistry:
            registry = stored if stored is not None else WeightRegistry.create_default()
            registry.register_controller(candidate_identity, self._context(caller_identity, attached_deposit))
            return registry

        self._mutate(call)
        logger.info("Registered controller %s on registry=%s", candidate_identity, self.registry_id)

    def update_weights(self, updates: Iterable[AssetWeightUpdate], caller_identity: str) -> None:
        batch = list(updates)

        def call(stored: WeightRegistry | None) -> WeightRegistry:
            registry = stored if stored is not None else WeightRegistry.create_default()
            registry.update_weights(batch, self._context(caller_identity))
            return registry

        self._mutate(call)
        logger.info("Updated weights: %s", batch)

    def get_weights(self) -> list[AssetWeightUpdate]:
        return self.load().get_weights()

    def get_assets(self) -> list[str]:
        return self.load().get_assets()

    def get_controller(self) -> str | None:
        return self.load().get_controller()
