from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LEVELS_BY_VERBOSE = {
    0: logging.WARNING,
    1: logging.INFO,   # campaign start / per-bankroll progress
    2: logging.DEBUG,  # seeds and trial partitions
}


def setup_logging(
    verbose_count: int = 0,
    logger_name: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Map the CLI -v count onto a logger level and attach one stderr handler.

    Calling again only adjusts the level; the handler is tagged so it is
    never attached twice.
    """
    level = _LEVELS_BY_VERBOSE.get(verbose_count, logging.DEBUG)
    logger = logging.getLogger(logger_name or "")
    logger.setLevel(level)

    if not any(getattr(h, "_casino_ruin_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream=stream or sys.stderr)
        handler._casino_ruin_handler = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)

    if level > logging.DEBUG:
        logging.getLogger("concurrent.futures").setLevel(logging.WARNING)

    return logger
