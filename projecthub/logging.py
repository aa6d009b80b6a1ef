"""Logging setup shared by the API process and its tests."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from projecthub.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def configure_logging(settings: Settings) -> None:
    """Install a single stream handler on the root logger.

    Development runs log at DEBUG, everything else at INFO unless
    LOG_LEVEL overrides it. Calling this more than once only adjusts
    the level.
    """
    global _configured
    level_name = settings.log_level or ("INFO" if settings.is_production else "DEBUG")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        _configured = True

    # SQL echo is controlled by DB_ECHO; keep the engine logger quiet otherwise.
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
