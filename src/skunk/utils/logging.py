"""Logging configuration for skunk."""

import logging
import sys

from skunk.utils.config import Config
from logging.handlers import RotatingFileHandler


def setup_logging(config: Config, console_output: bool = False) -> None:
    """
    Set up logging for skunk.

    Args:
        config: Application configuration
        console_output: Whether to output logs to console (default: False)
    """
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format_str)

    # Console format is simpler (no timestamp)
    console_format = "%(levelname)s - %(name)s - %(message)s"
    console_formatter = logging.Formatter(console_format)

    root_logger = logging.getLogger("skunk")
    root_logger.setLevel(logging.DEBUG)

    # Repeated invocations in one process (tests, CliRunner) must not stack handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    try:
        config.logging_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.logging_path / "skunk.log", maxBytes=100_000, backupCount=3
        )
    except OSError as e:
        print(f"Warning: file logging disabled ({e})", file=sys.stderr)
    else:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    # Optionally log to console (--verbose)
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(logging.INFO)
        root_logger.addHandler(console_handler)
