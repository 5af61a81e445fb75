"""
observability/log.py — loguru sink setup.

Modules log through `from loguru import logger` directly. This only swaps
loguru's default stderr sink for one at the configured level; call it once
from an entry point (cli.py, server.py startup), never from library code.
"""

import sys

from loguru import logger

from config import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), format=LOG_FORMAT)
