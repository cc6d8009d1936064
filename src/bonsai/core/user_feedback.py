"""User-facing diagnostic output."""

from abc import ABC, abstractmethod

import click

from bonsai.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress output to core operations.

    Core code (the lifecycle controller) reports progress through this
    interface instead of printing, so tests can capture messages and
    commands decide how loud to be.

    Usage:
        feedback.info("Fetching latest from remote")
        feedback.success("Worktree created")
        feedback.warning("Could not fetch from remote (continuing anyway)")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show a non-fatal problem."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Feedback written to stderr with click styling."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
