"""Logging configuration for the application."""

import logging
import sys

from eventhub.core.config import get_log_level


def setup_logging() -> None:
    """Configure logging for the application."""
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(get_log_level())
    root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
