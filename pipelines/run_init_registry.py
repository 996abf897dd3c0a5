"""Pipeline entrypoint: initialize a registry with its rebalance interval."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import settings  # noqa: E402
from db.connections import create_registry_engine  # noqa: E402
from registry.errors import RegistryError  # noqa: E402
from registry.weight_registry import DEFAULT_REBALANCE_INTERVAL  # noqa: E402
from services.registry_service import RegistryService  # noqa: E402
from utils.log import configure_logging  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize the index fund weight registry.")
    parser.add_argument(
        "--rebalance-interval",
        type=int,
        default=DEFAULT_REBALANCE_INTERVAL,
        help=f"Rebalance interval in blocks (default: {DEFAULT_REBALANCE_INTERVAL}).",
    )
    parser.add_argument("--registry-id", default=settings.registry_id, help="Registry to initialize.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(settings.log_level)

    service = RegistryService(create_registry_engine(), registry_id=args.registry_id)
    try:
        registry = service.create(args.rebalance_interval)
    except RegistryError as exc:
        print(f"[FAIL] {type(exc).__name__}: {exc}")
        return 1

    print(
        "run_init_registry completed",
        f"registry_id={args.registry_id}",
        f"rebalance_interval={registry.rebalance_interval}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
