"""Elapsed-time logging for startup steps."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional


@contextmanager
def log_timing(
    label: str, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG
) -> Iterator[None]:
    """Logs how long the block took in milliseconds, even when it raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        (logger or logging.getLogger(__name__)).log(level, "%s took %.1f ms", label, elapsed_ms)
