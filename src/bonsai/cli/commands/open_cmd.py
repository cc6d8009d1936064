"""bonsai open: open the current worktree in the configured editor."""

import subprocess
from pathlib import Path

import click

from bonsai.cli.alias import alias
from bonsai.cli.ensure import Ensure
from bonsai.cli.output import error_line, user_output
from bonsai.core.config import BonsaiConfig
from bonsai.core.context import BonsaiContext


def open_folder(ctx: BonsaiContext, config: BonsaiConfig, folder: Path) -> None:
    """Open folder in the configured editor, exiting 1 if it cannot be launched."""
    editor = config.editor.name
    try:
        ctx.editor_ops.open(editor, folder)
    except (OSError, subprocess.CalledProcessError) as e:
        user_output(error_line(f"Could not open {editor.display_name}: {e}"))
        raise SystemExit(1) from e
    ctx.feedback.success(f"Opened {folder.name} in {editor.display_name}")


@alias("bloom")
@click.command("open")
@click.pass_obj
def open_cmd(ctx: BonsaiContext) -> None:
    """Open the current worktree (or the main repo) in the editor."""
    repo = Ensure.in_repo(ctx)
    toplevel = Ensure.not_none(
        ctx.git_ops.get_toplevel(ctx.cwd), "Not inside a git repository."
    )
    config = Ensure.config_loaded(ctx, repo)
    open_folder(ctx, config, toplevel)
