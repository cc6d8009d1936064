"""bonsai list: show managed worktrees."""

from enum import Enum

import click
from rich.console import Console
from rich.table import Table

from bonsai.cli.alias import alias
from bonsai.cli.commands.open_cmd import open_folder
from bonsai.cli.ensure import Ensure, exit_on_error
from bonsai.cli.output import user_output
from bonsai.core.config import BonsaiConfig
from bonsai.core.context import BonsaiContext
from bonsai.core.lifecycle import PruneCandidate, list_prune_candidates, settings_from_config


class PickerAction(Enum):
    REFRESH = "refresh"
    SELECT = "select"
    EXIT = "exit"


def parse_picker_input(raw: str, count: int) -> tuple[PickerAction, int | None] | None:
    """Map one line of picker input to an action.

    Empty input or "r" refreshes, "q" exits, a 1-based number selects.

    Returns:
        (action, zero-based index for SELECT), or None if the input is invalid
    """
    text = raw.strip().lower()
    if text in ("", "r", "refresh"):
        return PickerAction.REFRESH, None
    if text in ("q", "quit", "exit"):
        return PickerAction.EXIT, None
    if text.isdigit() and 1 <= int(text) <= count:
        return PickerAction.SELECT, int(text) - 1
    return None


def _hint_markup(hint: str) -> str:
    if hint == "clean":
        return f"[green]{hint}[/green]"
    if hint.startswith("dirty"):
        return f"[yellow]{hint}[/yellow]"
    return f"[red]{hint}[/red]"


def _render_table(candidates: list[PruneCandidate], *, numbered: bool) -> None:
    table = Table(show_header=True, header_style="bold")
    if numbered:
        table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("worktree", style="cyan", no_wrap=True)
    table.add_column("branch", no_wrap=True)
    table.add_column("status", no_wrap=True)
    table.add_column("path", style="dim", no_wrap=True)

    for index, candidate in enumerate(candidates, start=1):
        row = [
            candidate.name,
            candidate.branch or "(detached)",
            _hint_markup(candidate.hint),
            str(candidate.path),
        ]
        if numbered:
            row.insert(0, str(index))
        table.add_row(*row)

    console = Console(stderr=True, width=200, force_terminal=True)
    console.print(table)
    console.print()


def _show_worktrees(
    ctx: BonsaiContext, config: BonsaiConfig, *, numbered: bool
) -> list[PruneCandidate]:
    with exit_on_error():
        candidates = list_prune_candidates(ctx.git_ops, settings_from_config(config))

    if not candidates:
        user_output("No worktrees found.")
        user_output(f"Run {click.style('bonsai grow <branch>', fg='cyan')} to create one.")
        return candidates

    user_output(click.style(f"Worktrees ({len(candidates)}):", bold=True))
    _render_table(candidates, numbered=numbered)
    user_output(click.style(f"Main repo: {config.repo.path}", dim=True))
    return candidates


def _run_picker(ctx: BonsaiContext, config: BonsaiConfig) -> None:
    candidates = _show_worktrees(ctx, config, numbered=True)
    while candidates:
        raw = ctx.prompter.text("Open # (r to refresh, q to quit)", default="q")
        parsed = parse_picker_input(raw, len(candidates))
        if parsed is None:
            user_output(click.style(f"Invalid choice: {raw}", fg="red"))
            continue

        action, index = parsed
        match action:
            case PickerAction.REFRESH:
                candidates = _show_worktrees(ctx, config, numbered=True)
            case PickerAction.EXIT:
                return
            case PickerAction.SELECT if index is not None:
                _open_candidate(ctx, config, candidates[index])
                return


def _open_candidate(ctx: BonsaiContext, config: BonsaiConfig, candidate: PruneCandidate) -> None:
    Ensure.invariant(
        ctx.git_ops.path_exists(candidate.path),
        f"Worktree directory is missing: {candidate.path}",
    )
    open_folder(ctx, config, candidate.path)


@alias("ls")
@click.command("list")
@click.option(
    "-i",
    "--interactive",
    is_flag=True,
    help="Pick a worktree to open in the editor, refreshing on demand.",
)
@click.pass_obj
def list_cmd(ctx: BonsaiContext, interactive: bool) -> None:
    """List worktrees under the configured worktree base."""
    repo = Ensure.in_repo(ctx)
    config = Ensure.config_loaded(ctx, repo)

    if interactive:
        _run_picker(ctx, config)
        return

    candidates = _show_worktrees(ctx, config, numbered=False)
    if candidates:
        prune_hint = click.style("bonsai prune <branch>", fg="cyan")
        user_output(f"Run {prune_hint} to remove a worktree.")
