"""Pipeline utility: print the controller and current portfolio weights."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import settings  # noqa: E402
from db.connections import create_registry_engine  # noqa: E402
from services.registry_service import RegistryService  # noqa: E402
from transform.weight_updates import weights_frame  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show registry controller and weights.")
    parser.add_argument("--registry-id", default=settings.registry_id, help="Registry to read.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    registry = RegistryService(create_registry_engine(), registry_id=args.registry_id).load()

    print(f"registry_id={args.registry_id}")
    print(f"status={registry.status.value}")
    print(f"controller={registry.get_controller() or '-'}")
    print(f"rebalance_interval={registry.rebalance_interval}")

    weights_df = weights_frame(registry.get_weights())
    if weights_df.empty:
        print("(no assets)")
    else:
        print(weights_df.to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
