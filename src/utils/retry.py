"""Retry helper for transient database operations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import OperationalError

T = TypeVar("T")

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (OperationalError,)


def retry(
    fn: Callable[[], T],
    attempts: int = 3,
    delay_seconds: float = 0.25,
    retry_on: tuple[type[Exception], ...] = TRANSIENT_ERRORS,
) -> T:
    """Call fn, retrying only on retry_on errors; anything else propagates at once."""
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retry_on as exc:
            last_error = exc
            logger.warning("Transient failure (attempt %d/%d): %s", attempt, attempts, exc)
            if attempt < attempts:
                time.sleep(delay_seconds)
    assert last_error is not None
    raise last_error
