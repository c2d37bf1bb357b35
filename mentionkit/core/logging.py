"""Central logging configuration."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path

LOG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "mentionkit" / "logs"
LOG_FILE = LOG_DIR / "mentionkit.log"


def configure_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Configure console and rotating file logging for the package loggers."""

    target = log_file or LOG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(target, maxBytes=512_000, backupCount=5)
    file_handler.setFormatter(formatter)

    package_logger = logging.getLogger("mentionkit")
    package_logger.setLevel(level)

    if not package_logger.handlers:
        package_logger.addHandler(console_handler)
        package_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger; handlers live on the package logger."""

    return logging.getLogger(name)
