"""Output utilities for CLI commands with clear intent.

user_output() is for human-readable messages and goes to stderr so that
stdout stays clean for values other programs consume (machine_output()).
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Print a user-facing message to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Print a machine-consumable value (e.g. a path) to stdout."""
    click.echo(message, nl=nl)


def error_line(message: str) -> str:
    return click.style("Error: ", fg="red") + message


def warning_line(message: str) -> str:
    return click.style("Warning: ", fg="yellow") + message


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"
