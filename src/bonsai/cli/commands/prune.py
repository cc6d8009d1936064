"""bonsai prune: remove one or more worktrees."""

from pathlib import Path

import click

from bonsai.cli.alias import alias
from bonsai.cli.ensure import Ensure, exit_cancelled, exit_on_error
from bonsai.cli.output import pluralize, user_output
from bonsai.core.context import BonsaiContext
from bonsai.core.lifecycle import (
    PruneSummary,
    WorktreeSettings,
    list_prune_candidates,
    prune_worktree,
    prune_worktrees_batch,
    resolve_prune_target,
    settings_from_config,
)
from bonsai.core.prompts import SelectOption


def _prune_single(ctx: BonsaiContext, settings: WorktreeSettings, branch: str) -> None:
    with exit_on_error():
        path = resolve_prune_target(ctx.git_ops, settings, branch)
        ctx.feedback.info(f"Branch: {click.style(branch, fg='cyan')}")
        ctx.feedback.info(f"Worktree: {click.style(str(path), dim=True)}")
        result = prune_worktree(ctx.git_ops, ctx.prompter, ctx.feedback, settings, path)

    suffix = " (forced)" if result.forced else ""
    ctx.feedback.success(f"Worktree removed{suffix}")
    user_output(f"Pruned {click.style(branch, fg='cyan')}. The branch itself was kept.")


def _print_summary(summary: PruneSummary) -> None:
    parts = [click.style(f"{pluralize(summary.succeeded, 'worktree')} removed", fg="green")]
    if summary.failed:
        parts.append(click.style(f"{summary.failed} failed", fg="red"))
    if summary.cancelled:
        parts.append(click.style(f"{summary.cancelled} skipped", fg="yellow"))
    user_output("")
    user_output(", ".join(parts))


def _prune_interactive(ctx: BonsaiContext, settings: WorktreeSettings) -> None:
    with exit_on_error():
        candidates = list_prune_candidates(ctx.git_ops, settings)

    if not candidates:
        user_output("No worktrees to prune.")
        user_output(f"Run {click.style('bonsai grow <branch>', fg='cyan')} to create one.")
        return

    options = [SelectOption(value=str(c.path), label=c.name, hint=c.hint) for c in candidates]
    selected = ctx.prompter.select_many("Select worktrees to prune:", options)
    if not selected:
        exit_cancelled("No worktrees selected.")

    summary = prune_worktrees_batch(
        ctx.git_ops,
        ctx.prompter,
        ctx.feedback,
        settings,
        [Path(value) for value in selected],
    )
    _print_summary(summary)
    if summary.failed or (summary.cancelled and not summary.succeeded):
        raise SystemExit(1)


@alias("rm", "remove")
@click.command("prune")
@click.argument("branch", required=False)
@click.pass_obj
def prune_cmd(ctx: BonsaiContext, branch: str | None) -> None:
    """Remove the worktree for BRANCH, or pick several interactively.

    Clean worktrees are removed without prompting. A worktree with
    uncommitted changes is only removed after confirming a forced delete.
    """
    repo = Ensure.in_repo(ctx)
    config = Ensure.config_loaded(ctx, repo)
    settings = settings_from_config(config)

    if branch is not None:
        _prune_single(ctx, settings, branch)
    else:
        _prune_interactive(ctx, settings)
