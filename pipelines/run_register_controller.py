"""Pipeline entrypoint: register the registry controller (curator), once."""

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
from utils.log import configure_logging  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register the controller allowed to update weights.")
    parser.add_argument("--controller", required=True, help="Identity to register as controller.")
    parser.add_argument(
        "--caller",
        default=None,
        help="Identity making the call (default: the controller itself).",
    )
    parser.add_argument(
        "--deposit",
        type=int,
        required=True,
        help="Attached storage deposit in the smallest unit.",
    )
    parser.add_argument("--registry-id", default=settings.registry_id, help="Target registry.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(settings.log_level)

    service = RegistryService(create_registry_engine(), registry_id=args.registry_id)
    try:
        service.register_controller(
            candidate_identity=args.controller,
            caller_identity=args.caller or args.controller,
            attached_deposit=args.deposit,
        )
    except RegistryError as exc:
        print(f"[FAIL] {type(exc).__name__}: {exc}")
        return 1

    print("run_register_controller completed", f"registry_id={args.registry_id}", f"controller={args.controller}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
