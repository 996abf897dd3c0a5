"""Pipeline entrypoint: submit one weight batch as the registry controller."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import settings  # noqa: E402
from db.connections import create_registry_engine  # noqa: E402
from registry.errors import RegistryError  # noqa: E402
from services.registry_service import RegistryService  # noqa: E402
from transform.weight_updates import parse_weight_pairs, read_weights_csv  # noqa: E402
from utils.log import configure_logging  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Update portfolio weights. The resulting portfolio must sum to 10000 bps."
    )
    parser.add_argument("--caller", required=True, help="Identity making the call; must be the controller.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--weight",
        action="append",
        metavar="ASSET_ID=BPS",
        help="Weight in basis points for one asset; repeat for several assets.",
    )
    source.add_argument("--weights-csv", help="CSV with asset_id,weight columns.")
    parser.add_argument("--registry-id", default=settings.registry_id, help="Target registry.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(settings.log_level)

    service = RegistryService(create_registry_engine(), registry_id=args.registry_id)
    try:
        updates = read_weights_csv(args.weights_csv) if args.weights_csv else parse_weight_pairs(args.weight)
        service.update_weights(updates, caller_identity=args.caller)
    except (RegistryError, ValueError) as exc:
        print(f"[FAIL] {type(exc).__name__}: {exc}")
        return 1

    print(
        "run_update_weights completed",
        f"registry_id={args.registry_id}",
        f"updates={len(updates)}",
        f"assets={len(service.get_assets())}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
