"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.

Core operations raise BonsaiError subclasses; `exit_on_error()` is the one
place where those become an "Error:" line and exit code 1.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn, TypeVar

import click

from bonsai.cli.output import error_line, user_output
from bonsai.core.config import BonsaiConfig
from bonsai.core.context import BonsaiContext
from bonsai.core.errors import BonsaiError, Cancelled, ConfigNotFound
from bonsai.core.repo_discovery import NoRepoSentinel, RepoContext

T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(error_line(error_message))
            raise SystemExit(1)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Returns:
            The value unchanged if not None (with narrowed type T)

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            user_output(error_line(error_message))
            raise SystemExit(1)
        return value

    @staticmethod
    def in_repo(ctx: BonsaiContext) -> RepoContext:
        """Ensure the command runs inside a git repository."""
        if isinstance(ctx.repo, NoRepoSentinel):
            user_output(error_line(ctx.repo.message))
            raise SystemExit(1)
        return ctx.repo

    @staticmethod
    def config_loaded(ctx: BonsaiContext, repo: RepoContext) -> BonsaiConfig:
        """Load the repository config, exiting with a hint to run init if missing."""
        try:
            return ctx.config_store.load(repo.root)
        except ConfigNotFound as e:
            init_hint = click.style("bonsai init", fg="cyan")
            user_output(error_line(f"No bonsai config found. Run {init_hint} first."))
            raise SystemExit(1) from e
        except BonsaiError as e:
            user_output(error_line(e.message))
            raise SystemExit(1) from e


def exit_cancelled(message: str) -> NoReturn:
    """Report a declined decision point and exit 1."""
    user_output(click.style(message, fg="yellow"))
    raise SystemExit(1)


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Convert BonsaiError into a styled message and exit code 1.

    Cancelled is shown in yellow without the "Error:" prefix.
    """
    try:
        yield
    except Cancelled as e:
        exit_cancelled(e.message)
    except BonsaiError as e:
        user_output(error_line(e.message))
        raise SystemExit(1) from e
