"""
Loguru sink setup shared by the CLI and any embedding service.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(level: str = "INFO", log_dir: str = "logs", file_logging: bool = True) -> None:
    """Replace the default sink with console + daily rotating file sinks."""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)
    if file_logging:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        logger.add(
            f"{log_dir}/affiliate_empire_{{time:YYYY-MM-DD}}.log",
            rotation="1 day",
            retention="7 days",
            level="DEBUG",
        )
