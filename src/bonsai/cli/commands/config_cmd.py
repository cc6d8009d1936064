"""bonsai config: edit the repository config file."""

import os

import click

from bonsai.cli.ensure import Ensure
from bonsai.cli.output import error_line, user_output
from bonsai.core.context import BonsaiContext
from bonsai.core.errors import ConfigError
from bonsai.core.shell_ops import ShellOps

FALLBACK_EDITORS = ["code", "cursor", "vim", "nvim", "nano", "vi"]


def find_terminal_editor(shell_ops: ShellOps, env: dict[str, str]) -> str:
    """$EDITOR, then $VISUAL, then the first common editor on PATH."""
    for var in ("EDITOR", "VISUAL"):
        if env.get(var):
            return env[var]

    for editor in FALLBACK_EDITORS:
        if shell_ops.get_installed_tool_path(editor) is not None:
            return editor

    return "vi"


@click.command("config")
@click.pass_obj
def config_cmd(ctx: BonsaiContext) -> None:
    """Open this repository's config file in an editor.

    Uses the configured editor. If the config cannot be parsed, falls back
    to $EDITOR or $VISUAL so the file can still be fixed.
    """
    repo = Ensure.in_repo(ctx)
    config_path = ctx.config_store.path_for(repo.root)
    if not ctx.config_store.exists(repo.root):
        init_hint = click.style("bonsai init", fg="cyan")
        user_output(error_line(f"No bonsai config found. Run {init_hint} first."))
        raise SystemExit(1)

    try:
        editor_command = ctx.config_store.load(repo.root).editor.name.command
    except ConfigError as e:
        ctx.feedback.warning(f"Config is invalid: {e.message}")
        editor_command = find_terminal_editor(ctx.shell_ops, dict(os.environ))

    user_output(f"Opening config in {click.style(editor_command, fg='cyan')}")
    user_output(click.style(str(config_path), dim=True))

    try:
        exit_code = ctx.shell_ops.open_file_in_editor(editor_command, config_path)
    except OSError as e:
        user_output(error_line(f"Could not open editor: {e}"))
        raise SystemExit(1) from e

    if exit_code != 0:
        ctx.feedback.warning(f"Editor exited with code {exit_code}")
        user_output("Config may not have been saved.")
