"""Logging setup shared by the CLI and the API server."""

from __future__ import annotations

import logging
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Per-request access lines drown out lock transitions
_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level: str = "INFO", verbose: Iterable[str] = ()) -> None:
    """Configure the root logger.

    Loggers named in *verbose* are lowered to DEBUG regardless of *level*,
    e.g. ``soft_targeting.targeting`` for per-evaluation detail.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in verbose:
        logging.getLogger(name).setLevel(logging.DEBUG)
    if numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
