"""Logging setup for the HubLib application."""

from __future__ import annotations

import logging

from hublib.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the running process.

    Args:
        level: Optional level name overriding ``settings.log_level``.
    """
    resolved = (level or settings.log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("hublib").setLevel(resolved)
    # SQL echo is controlled separately through SQL_DEBUG.
    if not settings.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
