"""Sequential execution of configured setup commands."""

from dataclasses import dataclass
from pathlib import Path

import click

from bonsai.core.shell_ops import ShellOps
from bonsai.core.user_feedback import UserFeedback


@dataclass(frozen=True)
class SetupResult:
    """Outcome of running setup commands.

    Attributes:
        completed: Number of commands that exited 0
        total: Number of configured commands
        failed_command: The command that failed, if any
        exit_code: Exit code of the failed command (0 on success)
    """

    completed: int
    total: int
    failed_command: str | None = None
    exit_code: int = 0

    @property
    def success(self) -> bool:
        return self.failed_command is None

    @property
    def remaining(self) -> int:
        """Commands that never ran because an earlier one failed."""
        if self.success:
            return 0
        return self.total - self.completed - 1


def run_setup_commands(
    shell_ops: ShellOps,
    feedback: UserFeedback,
    commands: list[str],
    cwd: Path,
) -> SetupResult:
    """Run commands one after another in cwd, stopping at the first failure.

    Output of each command streams straight to the terminal.
    """
    total = len(commands)
    feedback.info(click.style(f"Working directory: {cwd}", dim=True))

    for index, command in enumerate(commands):
        header = click.style(f"━━━ [{index + 1}/{total}] ", fg="cyan")
        footer = click.style(" ━━━", fg="cyan")
        feedback.info(header + click.style(command, bold=True) + footer)

        exit_code = shell_ops.run_command(command, cwd)
        if exit_code != 0:
            feedback.error(f"✗ Command failed with exit code {exit_code}")
            result = SetupResult(
                completed=index, total=total, failed_command=command, exit_code=exit_code
            )
            if result.remaining > 0:
                feedback.warning(f"Stopping setup. {result.remaining} command(s) remaining.")
            return result

        feedback.success("✓ Command completed successfully")

    return SetupResult(completed=total, total=total)
