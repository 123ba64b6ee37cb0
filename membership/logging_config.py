"""Loguru sink setup."""
import sys

from loguru import logger

from membership.settings import settings


def configure_logging(level: str = None) -> None:
    """Replace the default loguru sink with one honouring the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {name}:{function} - {message}",
    )
