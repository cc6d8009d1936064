"""Interactive prompts used at decision points.

The lifecycle controller never talks to the terminal directly; it asks a
Prompter. Production uses ClickPrompter, tests use an in-memory fake that
replays scripted answers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import click

from bonsai.cli.output import user_output


@dataclass(frozen=True)
class SelectOption:
    """One entry in a selection list."""

    value: str
    label: str
    hint: str | None = None


def parse_selection(raw: str, count: int) -> list[int] | None:
    """Parse a multi-select answer into zero-based indices.

    Accepts comma or whitespace separated 1-based numbers, ranges like
    "2-4", and "all". Duplicates are dropped, order of first mention kept.

    Returns:
        List of indices, or None if any token is invalid or out of range

    Examples:
        >>> parse_selection("1, 3", 3)
        [0, 2]
        >>> parse_selection("2-3", 3)
        [1, 2]
        >>> parse_selection("7", 3) is None
        True
    """
    text = raw.strip().lower()
    if text == "":
        return []
    if text == "all":
        return list(range(count))

    indices: list[int] = []
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            if not (start_text.isdigit() and end_text.isdigit()):
                return None
            start, end = int(start_text), int(end_text)
            if start < 1 or end > count or start > end:
                return None
            candidates = range(start - 1, end)
        else:
            if not token.isdigit():
                return None
            number = int(token)
            if number < 1 or number > count:
                return None
            candidates = range(number - 1, number)

        for index in candidates:
            if index not in indices:
                indices.append(index)
    return indices


class Prompter(ABC):
    """Abstract interface for blocking user prompts."""

    @abstractmethod
    def confirm(self, message: str, *, default: bool) -> bool:
        """Ask a yes/no question."""
        ...

    @abstractmethod
    def text(self, message: str, *, default: str | None = None) -> str:
        """Ask for free-form text."""
        ...

    @abstractmethod
    def select(self, message: str, options: list[SelectOption], *, default: str | None) -> str:
        """Pick exactly one option; returns its value."""
        ...

    @abstractmethod
    def select_many(self, message: str, options: list[SelectOption]) -> list[str]:
        """Pick any number of options; returns their values in display order.

        An empty list means nothing was selected.
        """
        ...


def _format_option(index: int, option: SelectOption) -> str:
    line = f"  {click.style(str(index), fg='cyan')}) {click.style(option.label, bold=True)}"
    if option.hint:
        line += " " + click.style(f"({option.hint})", dim=True)
    return line


class ClickPrompter(Prompter):
    """Production prompter using click's terminal prompts (stderr)."""

    def confirm(self, message: str, *, default: bool) -> bool:
        return click.confirm(message, default=default, err=True)

    def text(self, message: str, *, default: str | None = None) -> str:
        return click.prompt(message, default=default, err=True, type=str)

    def select(self, message: str, options: list[SelectOption], *, default: str | None) -> str:
        user_output(message)
        default_index = 1
        for index, option in enumerate(options, start=1):
            user_output(_format_option(index, option))
            if option.value == default:
                default_index = index

        choice = click.prompt(
            "Choice",
            type=click.IntRange(1, len(options)),
            default=default_index,
            err=True,
        )
        return options[choice - 1].value

    def select_many(self, message: str, options: list[SelectOption]) -> list[str]:
        user_output(message)
        for index, option in enumerate(options, start=1):
            user_output(_format_option(index, option))

        while True:
            raw = click.prompt(
                "Numbers (e.g. 1,3 or 2-4, 'all'; empty to cancel)",
                default="",
                show_default=False,
                err=True,
            )
            indices = parse_selection(raw, len(options))
            if indices is not None:
                return [options[i].value for i in sorted(indices)]
            user_output(click.style(f"Invalid selection: {raw}", fg="red"))
