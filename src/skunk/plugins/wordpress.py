"""WP-CLI and WordPress Studio invocation."""

import json
import logging
from pathlib import Path

from skunk.utils.tools import ToolResult, command_exists, run_tool

logger = logging.getLogger(__name__)


class WordPressCLI:
    """
    Run WP-CLI commands either directly (``wp``) or through WordPress Studio
    (``studio wp``).

    Only plain ``wp`` can install from a URL; Studio installs from a local
    archive.
    """

    SUPPORTED_TOOLS = ("wp", "studio")

    def __init__(self, tool: str, wp_path: Path | None = None):
        if tool not in self.SUPPORTED_TOOLS:
            raise ValueError(f"Unsupported WordPress tool: {tool}")
        self.tool = tool
        self.wp_path = wp_path

    @classmethod
    def detect(cls, wp_path: Path | None = None) -> "WordPressCLI | None":
        """Return a CLI for the first available tool, preferring ``wp``."""
        for tool in cls.SUPPORTED_TOOLS:
            if command_exists(tool):
                return cls(tool, wp_path)
        return None

    @property
    def accepts_urls(self) -> bool:
        return self.tool == "wp"

    def command(self, *args: str) -> list[str]:
        base = ["wp"] if self.tool == "wp" else ["studio", "wp"]
        cmd = base + list(args)
        if self.wp_path:
            cmd.append(f"--path={self.wp_path}")
        return cmd

    def install_plugin(self, source: str, force: bool = False) -> ToolResult:
        """Install and activate a plugin from a URL or archive path."""
        args = ["plugin", "install", source, "--activate"]
        if force:
            args.append("--force")
        return run_tool(self.command(*args))

    def installed_plugins(self) -> dict[str, str]:
        """
        Map of installed plugin slug to version.

        Uses ``--format=json`` so nothing depends on human-readable output.
        Returns an empty dict if the command fails (e.g. not inside a site).
        """
        result = run_tool(
            self.command("plugin", "list", "--format=json", "--fields=name,status,version")
        )
        if not result.ok:
            return {}

        try:
            rows = json.loads(result.stdout)
        except ValueError:
            logger.warning(f"{self.tool} plugin list returned non-JSON output")
            return {}

        if not isinstance(rows, list):
            return {}
        return {
            str(row["name"]): str(row.get("version", ""))
            for row in rows
            if isinstance(row, dict) and "name" in row
        }
