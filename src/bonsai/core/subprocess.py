"""Subprocess execution with rich error context.

Wraps subprocess.run() so that every failing git invocation surfaces as a
GitError carrying the operation, the command line, the exit code and stderr.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from bonsai.core.errors import GitError

logger = logging.getLogger(__name__)


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a command, raising GitError with enriched context on failure.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of the operation
            (e.g. "list worktrees")
        cwd: Working directory for command execution

    Returns:
        CompletedProcess with captured text stdout/stderr

    Raises:
        GitError: If the command exits non-zero or the binary is missing
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    logger.debug("Running: %s (cwd=%s)", cmd_str, cwd)

    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr_text = (e.stderr or "").strip()
        error_msg = f"Failed to {operation_context}: {stderr_text or 'unknown error'}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"
        logger.debug("Command failed: %s (exit %d)", cmd_str, e.returncode)
        raise GitError(error_msg, exit_code=e.returncode, stderr=stderr_text) from e
    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        raise GitError(error_msg, exit_code=127, stderr=str(e)) from e
