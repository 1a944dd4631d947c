# src/proofline/observability/log.py

"""Logging setup for the language server process.

stdout carries the protocol, so log records go to a file.
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s [proofline] %(levelname)s %(name)s: %(message)s"


def configure_logging(
    path: str | Path = "proofline.log",
    level: int | str = logging.INFO,
) -> logging.Handler:
    """Route the ``proofline`` logger hierarchy to a truncated log file.

    Args:
        path: Log file path. Truncated on every start.
        level: Logging level name or number.

    Returns:
        The installed handler, so callers can remove it again.
    """
    handler = logging.FileHandler(str(path), mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("proofline")
    root.setLevel(level.upper() if isinstance(level, str) else level)
    root.addHandler(handler)
    return handler
