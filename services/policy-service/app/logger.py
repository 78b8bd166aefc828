from __future__ import annotations

import logging

from .settings import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# driver chatter drowns out request logs at DEBUG
_NOISY = ("pymongo", "motor")

def setup_logging(level: str | None = None) -> None:
    lvl = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    for name in _NOISY:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))

__all__ = ["setup_logging", "LOG_FORMAT"]
