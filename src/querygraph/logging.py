from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import os


_configured = False

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
ROOT_LOGGER = "querygraph"


def _ensure_base_logger() -> None:
    global _configured
    if _configured:
        return
    level = os.getenv("QUERYGRAPH_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
    )
    # basicConfig is a no-op when the root logger already has handlers
    logging.getLogger(ROOT_LOGGER).setLevel(getattr(logging, level, logging.INFO))
    _configured = True
    log_file = os.getenv("QUERYGRAPH_LOG_FILE")
    if log_file:
        add_file_handler(Path(log_file))


def get_logger(name: str) -> logging.Logger:
    _ensure_base_logger()
    return logging.getLogger(name)


def add_file_handler(log_file: Path) -> RotatingFileHandler:
    """Also write everything under the `querygraph` logger to a rotating file."""
    logger = logging.getLogger(ROOT_LOGGER)
    target = os.path.abspath(log_file)
    # Do not duplicate handlers for the same file
    for h in logger.handlers:
        if isinstance(h, RotatingFileHandler) and h.baseFilename == target:
            return h
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def set_level(level: str | int) -> None:
    """Override the level picked from QUERYGRAPH_LOG_LEVEL, e.g. for `--verbose`."""
    _ensure_base_logger()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)
    logging.getLogger(ROOT_LOGGER).setLevel(level)
