"""Logging setup: one call at application start."""
from __future__ import annotations
import logging

from homework_planner.core.config import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=_FORMAT)
