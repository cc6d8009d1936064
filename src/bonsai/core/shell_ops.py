"""Shell command execution with live output."""

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class ShellOps(ABC):
    """Abstract interface for running user-configured shell commands."""

    @abstractmethod
    def run_command(self, command: str, cwd: Path) -> int:
        """Run a shell command, streaming its output to the terminal.

        Args:
            command: Shell command line (may be compound, e.g. "a && b")
            cwd: Working directory

        Returns:
            The command's exit code
        """
        ...

    @abstractmethod
    def get_installed_tool_path(self, tool_name: str) -> str | None:
        """Return the absolute path of tool_name on PATH, or None."""
        ...

    @abstractmethod
    def open_file_in_editor(self, editor_command: str, path: Path) -> int:
        """Open a file in a terminal editor command such as "vim" or "code --wait".

        Returns:
            The editor's exit code
        """
        ...


class RealShellOps(ShellOps):
    """Production implementation using subprocess with inherited stdio."""

    def run_command(self, command: str, cwd: Path) -> int:
        env = os.environ.copy()
        # OSC 8 hyperlinks from yarn/npm render as underlines in some terminals
        env["NO_HYPERLINKS"] = "1"

        logger.debug("Running setup command in %s: %s", cwd, command)
        # set -e makes compound commands stop at the first failure
        result = subprocess.run(
            ["bash", "-c", f"set -e; {command}"],
            cwd=cwd,
            env=env,
            check=False,
        )
        return result.returncode

    def get_installed_tool_path(self, tool_name: str) -> str | None:
        return shutil.which(tool_name)

    def open_file_in_editor(self, editor_command: str, path: Path) -> int:
        parts = editor_command.split()
        result = subprocess.run([*parts, str(path)], check=False)
        return result.returncode
