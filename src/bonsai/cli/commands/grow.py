"""bonsai grow: create a worktree for a branch."""

import os
import subprocess
from pathlib import Path

import click

from bonsai.cli.alias import alias
from bonsai.cli.ensure import Ensure, exit_on_error
from bonsai.cli.output import user_output
from bonsai.core.config import BonsaiConfig, PostCreationAction
from bonsai.core.context import BonsaiContext
from bonsai.core.lifecycle import GrowResult, grow_worktree, settings_from_config
from bonsai.core.setup_runner import run_setup_commands

NAVIGATE_FILE_ENV = "BONSAI_NAVIGATE_FILE"


def _open_editor(ctx: BonsaiContext, config: BonsaiConfig, path: Path) -> None:
    """Open the new worktree; failure is reported but never fails grow."""
    editor = config.editor.name
    try:
        ctx.editor_ops.open(editor, path)
    except (OSError, subprocess.CalledProcessError) as e:
        ctx.feedback.warning(f"Could not open {editor.display_name}: {e}")
        ctx.feedback.info(f"You can manually open: {click.style(str(path), dim=True)}")
        return
    ctx.feedback.success(f"Opened {editor.display_name}")


def _print_summary(config: BonsaiConfig, result: GrowResult) -> None:
    user_output("")
    user_output(click.style("Worktree created", bold=True))
    user_output(f"  {click.style('Branch:', dim=True)} {result.branch}")
    user_output(f"  {click.style('Path:', dim=True)} {result.path}")
    user_output(f"  {click.style('Editor:', dim=True)} {config.editor.name.display_name}")


def _run_setup(ctx: BonsaiContext, config: BonsaiConfig, path: Path) -> None:
    commands = config.setup.commands
    user_output("")
    user_output(
        click.style(" SETUP RUNNING ", fg="black", bg="yellow")
        + click.style(f" {len(commands)} command(s) - please wait...", fg="yellow")
    )

    result = run_setup_commands(ctx.shell_ops, ctx.feedback, commands, path)

    user_output("")
    setup_hint = click.style("bonsai setup", fg="cyan")
    if result.success:
        user_output(
            click.style(" SETUP COMPLETE ", fg="black", bg="green") + " Your worktree is ready!"
        )
    else:
        user_output(
            click.style(" SETUP FAILED ", fg="white", bg="red")
            + f" Run {setup_hint} in the worktree to retry."
        )


def _write_navigate_file(ctx: BonsaiContext, config: BonsaiConfig, path: Path) -> None:
    """Hand the new path to shell integration so the parent shell can cd."""
    nav_file = os.environ.get(NAVIGATE_FILE_ENV)
    if not nav_file or not config.behavior.navigate_after_grow:
        return
    try:
        Path(nav_file).write_text(str(path), encoding="utf-8")
    except OSError as e:
        ctx.feedback.warning(f"Could not write navigation file {nav_file}: {e}")


@alias("add", "new")
@click.command("grow")
@click.argument("branch", required=False)
@click.pass_obj
def grow_cmd(ctx: BonsaiContext, branch: str | None) -> None:
    """Create a worktree for BRANCH.

    Uses the local branch if it exists, tracks origin/BRANCH if only the
    remote has it, and otherwise creates BRANCH from the latest main branch.
    """
    repo = Ensure.in_repo(ctx)
    config = Ensure.config_loaded(ctx, repo)
    if branch is None:
        branch = ctx.prompter.text("Branch name")

    with exit_on_error():
        result = grow_worktree(
            ctx.git_ops, ctx.prompter, ctx.feedback, settings_from_config(config), branch
        )

    if ctx.dry_run:
        user_output(click.style("[DRY RUN] ", fg="yellow") + "Skipping editor and setup commands")
        return

    if config.behavior.post_creation_action is PostCreationAction.OPEN_EDITOR:
        _open_editor(ctx, config, result.path)

    _print_summary(config, result)

    if config.setup.commands:
        _run_setup(ctx, config, result.path)

    _write_navigate_file(ctx, config, result.path)

    prune_hint = click.style(f"bonsai prune {result.branch}", fg="cyan")
    user_output("")
    user_output(f"Happy coding! Run {prune_hint} when done.")
