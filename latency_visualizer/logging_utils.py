import logging
import os
from threading import Lock

from .constants import LOG_LEVEL_ENV

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIG_LOCK = Lock()
_CONFIGURED = False


def resolve_level(level=None):
    """Turn a level name/number (or the environment override) into an int."""
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def configure_logging(level=None) -> None:
    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED:
            return

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel(resolve_level(level))
        _CONFIGURED = True
