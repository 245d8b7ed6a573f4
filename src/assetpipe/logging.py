from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import os


FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_configured = False


def _ensure_base_logger() -> None:
    global _configured
    if _configured:
        return
    level = os.getenv("ASSETPIPE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=FORMAT)
    log_file = os.getenv("ASSETPIPE_LOG_FILE")
    if log_file:
        _attach_file_handler(logging.getLogger("assetpipe"), Path(log_file))
    _configured = True


def _attach_file_handler(logger: logging.Logger, log_file: Path) -> None:
    # Do not duplicate handlers if already set
    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    _ensure_base_logger()
    if not name.startswith("assetpipe"):
        name = f"assetpipe.{name}"
    return logging.getLogger(name)
