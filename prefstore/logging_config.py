"""Root logger setup for the command line entry point."""
from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LEVEL = "WARNING"


def setup_logging(level: Optional[str] = None) -> None:
    requested = (level or os.getenv("PREFSTORE_LOG_LEVEL", DEFAULT_LEVEL)).upper()
    level = requested if requested in LOG_LEVELS else DEFAULT_LEVEL
    logging.captureWarnings(True)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    if requested != level:
        logging.getLogger(__name__).warning("Unknown log level %r, using %s", requested, level)


__all__ = ["DEFAULT_LEVEL", "LOG_LEVELS", "setup_logging"]
