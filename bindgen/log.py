"""
Diagnostic logging setup.

``init_logging`` is called once at process start by the command line. The level
is read from the ``BINDGEN_LOG`` environment variable (default: warning).
"""

from __future__ import annotations

import logging
import os
import sys

LOG_ENV_VAR = "BINDGEN_LOG"
DEFAULT_LEVEL = "warning"
LOG_FORMAT = "%(levelname)s:%(name)s: %(message)s"

logger = logging.getLogger("bindgen")

_initialized = False


def _parse_level(value: str) -> int:
    # Accept "debug" as well as "bindgen=debug"
    if "=" in value:
        value = value.split("=", 1)[1]
    value = value.strip().upper()
    if value == "WARN":
        value = "WARNING"
    level = logging.getLevelName(value)
    if isinstance(level, int):
        return level
    return logging.WARNING


def is_initialized() -> bool:
    """Check if logging has been set up."""
    return _initialized


def init_logging() -> bool:
    """
    Configure the ``bindgen`` logger.

    Only the first call has an effect; later calls are no-ops.

    Returns:
        True if this call configured logging
    """
    global _initialized
    if _initialized:
        return False

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(os.environ.get(LOG_ENV_VAR, DEFAULT_LEVEL)))

    _initialized = True
    return True
