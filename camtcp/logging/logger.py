from __future__ import annotations

import logging
from typing import Optional


_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger("camtcp")
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s",
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        _LOGGER = logger
    return _LOGGER


def set_log_level(level: str) -> None:
    logger = get_logger()
    resolved = logging.getLevelName(level.strip().upper())
    if isinstance(resolved, int):
        logger.setLevel(resolved)
    else:
        logger.warning("Unknown log level %r, keeping %s", level, logging.getLevelName(logger.level))
