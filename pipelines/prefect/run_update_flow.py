"""Prefect flow to apply a weights CSV to the registry as one batch."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from prefect import flow, get_run_logger, task

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from config.settings import settings  # noqa: E402
from db.connections import create_registry_engine  # noqa: E402
from models.schemas import AssetWeightUpdate  # noqa: E402
from services.registry_service import RegistryService  # noqa: E402
from transform.weight_updates import read_weights_csv  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply a weights CSV to the registry via Prefect.")
    parser.add_argument("--weights-csv", required=True, help="CSV with asset_id,weight columns.")
    parser.add_argument("--caller", required=True, help="Identity making the call; must be the controller.")
    parser.add_argument("--registry-id", default=settings.registry_id, help="Target registry.")
    return parser.parse_args()


@task(name="load-weights-csv")
def load_weights(path: str) -> list[AssetWeightUpdate]:
    logger = get_run_logger()
    updates = read_weights_csv(path)
    total = sum(update.weight for update in updates)
    logger.info("Loaded %d weight updates from %s (batch total=%d bps)", len(updates), path, total)
    return updates


# Only the database read is retried; registry rejections are final.
@task(name="read-current-weights", retries=2, retry_delay_seconds=30)
def read_current_weights(registry_id: str) -> list[AssetWeightUpdate]:
    return RegistryService(create_registry_engine(), registry_id=registry_id).get_weights()


@task(name="apply-weight-batch")
def apply_weights(registry_id: str, caller: str, updates: list[AssetWeightUpdate]) -> None:
    logger = get_run_logger()
    service = RegistryService(create_registry_engine(), registry_id=registry_id)
    service.update_weights(updates, caller_identity=caller)
    logger.info("Applied %d weight updates to registry=%s", len(updates), registry_id)


@flow(name="index-fund-weight-update", log_prints=True)
def update_weights_flow(weights_csv: str, caller: str, registry_id: str = settings.registry_id) -> None:
    logger = get_run_logger()
    before = read_current_weights(registry_id)
    logger.info("Current weights: %s", [(w.asset_id, w.weight) for w in before])

    updates = load_weights(weights_csv)
    apply_weights(registry_id, caller, updates)

    after = read_current_weights(registry_id)
    print("update_weights_flow completed", f"registry_id={registry_id}", f"assets={len(after)}")


if __name__ == "__main__":
    args = _parse_args()
    update_weights_flow(weights_csv=args.weights_csv, caller=args.caller, registry_id=args.registry_id)
