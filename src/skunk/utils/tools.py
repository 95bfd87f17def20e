"""Probes and runners for the external command-line tools skunk drives."""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Outcome of a subprocess invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def command_exists(cmd: str) -> bool:
    """Return True if ``cmd`` resolves on PATH."""
    return shutil.which(cmd) is not None


def run_tool(
    args: list[str], cwd: Path | None = None, timeout: float | None = None
) -> ToolResult:
    """
    Run an external command and capture its output.

    Success is decided by exit status only. A command that cannot be started
    (missing binary, permission error) or that times out is reported as a
    non-zero result rather than raised.

    Args:
        args: Command and arguments
        cwd: Working directory for the command
        timeout: Seconds before the process is killed (None waits forever)

    Returns:
        ToolResult with exit code and captured output
    """
    logger.debug(f"Running: {' '.join(args)}")
    try:
        result = subprocess.run(
            args,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Timed out after {timeout}s: {args[0]}")
        return ToolResult(returncode=124, stderr=f"{args[0]} timed out")
    except OSError as e:
        logger.warning(f"Could not run {args[0]}: {e}")
        return ToolResult(returncode=127, stderr=str(e))

    if result.returncode != 0:
        logger.info(f"{args[0]} exited with {result.returncode}: {result.stderr.strip()}")
    return ToolResult(result.returncode, result.stdout, result.stderr)


def get_version(cmd: str, prefix: str = "") -> str | None:
    """
    Return the first line of ``cmd --version``, or None if it fails.

    Args:
        cmd: Executable name
        prefix: Leading text to strip from the output (e.g. "WP-CLI ")
    """
    result = run_tool([cmd, "--version"], timeout=15)
    if not result.ok:
        return None

    lines = result.stdout.strip().splitlines()
    if not lines:
        return None
    version = lines[0].strip()
    if prefix and version.startswith(prefix):
        version = version[len(prefix) :]
    return version
