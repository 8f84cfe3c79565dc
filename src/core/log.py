"""Logging setup for hosts embedding the engine. Library modules only create loggers, they never configure handlers."""

import logging
from typing import Optional

from src.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic stream handler on the root logger (level defaults to settings.log_level)."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
