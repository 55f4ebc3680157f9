"""Process-wide logging configuration driven by ``LOG_LEVEL``."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)
