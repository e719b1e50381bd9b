"""
Logging utilities for TickerTone.
"""

import sys
from loguru import logger
from config.settings import LOGGING_CONFIG


def setup_logging(level: str = None):
    """Set up console and rotating file sinks."""
    level = level or LOGGING_CONFIG['level']

    # Remove default handler
    logger.remove()

    # Console handler with colors
    logger.add(
        sys.stdout,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
        colorize=True
    )

    # File handler
    log_file = LOGGING_CONFIG['log_file']
    log_file.parent.mkdir(exist_ok=True)

    logger.add(
        log_file,
        level=level,
        format=LOGGING_CONFIG['format'],
        rotation=LOGGING_CONFIG['rotation'],
        retention=LOGGING_CONFIG['retention'],
        compression="zip"
    )

    logger.info("Logging initialized successfully")
