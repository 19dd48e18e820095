"""
Logging setup for the vehicle registry.

Every module calls get_logger(__name__). The first call attaches a console
handler and, unless LOG_TO_FILE is off, a size-rotated file under LOG_DIR
(default: logs/ at the repo root). Request-level noise from uvicorn access
logs and SQLAlchemy is held at WARNING so registration and arrival lines
stay readable.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

DEFAULT_LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool")

_configured = False


def log_file_path() -> str:
    return os.path.join(settings.LOG_DIR or DEFAULT_LOG_DIR, settings.LOG_FILE)


def _registry_file_handler(level: str, fmt: logging.Formatter) -> RotatingFileHandler:
    path = log_file_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        root.addHandler(_registry_file_handler(level, fmt))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger; configures the root logger on first use."""
    _configure_root_logger()
    return logging.getLogger(name)
