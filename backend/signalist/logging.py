"""Logging configuration shared by the web app and the job workers."""

import sys

from loguru import logger

from signalist.config.settings import settings


def setup_logger(level: str | None = None):
    """Replace loguru's default sink with a single stdout sink."""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=(level or settings.log_level).upper(),
        colorize=True,
    )
    return logger
