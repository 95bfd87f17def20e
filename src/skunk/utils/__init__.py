"""Utilities package."""

from skunk.utils.config import Config
from skunk.utils.logging import setup_logging
from skunk.utils.tools import ToolResult, command_exists, get_version, run_tool

__all__ = [
    "Config",
    "ToolResult",
    "command_exists",
    "get_version",
    "run_tool",
    "setup_logging",
]
