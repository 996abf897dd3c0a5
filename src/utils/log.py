"""Logging setup shared by the command-line entrypoints."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Invalid log level: {level}")
        level = resolved
    logging.basicConfig(level=level, format=LOG_FORMAT)
