"""Hash helpers for stable state fingerprints."""

from __future__ import annotations

import hashlib
import json


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def state_fingerprint(state: dict[str, object]) -> str:
    return sha256_hex(json.dumps(state, sort_keys=True, separators=(",", ":")))
