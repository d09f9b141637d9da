"""
Logging configuration for the application.

setup_logging() attaches a single console handler to the root logger.
Modules log through logging.getLogger(__name__); the request middleware
uses the "garage_tracker.access" logger.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once.

    Repeated calls (tests, several create_app() calls) only adjust the
    level and never stack extra handlers.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO"), case insensitive
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
