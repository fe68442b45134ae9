"""
Logging configuration for setto_crypto
"""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure logging with timestamp, file and line number information

    Library modules only create loggers; applications call this once at
    startup if they want console output.

    Args:
        level: Logging level (default: INFO)
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    package_logger = logging.getLogger("setto_crypto")
    package_logger.setLevel(level)

    # Avoid duplicate output when called more than once
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
