# Rev 1.0.0

"""Logging setup helpers for StockDesk."""
from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Tuple

from stockdesk.utils import paths


def _make_handlers(logfile: Path) -> Tuple[logging.Handler, logging.Handler]:
    file_handler = RotatingFileHandler(
        logfile,
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    file_handler.setFormatter(formatter)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    return file_handler, console


def setup_logging(name: str = "stockdesk", *, level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application and return the app logger."""
    paths.ensure_runtime_dirs()
    logfile = paths.LOG_DIR / f"{name}.log"

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        file_handler, console = _make_handlers(logfile)
        logger.addHandler(file_handler)
        logger.addHandler(console)

    logger.debug("Logging ready at %s", logfile)
    return logger
