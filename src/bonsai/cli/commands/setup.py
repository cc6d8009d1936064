"""bonsai setup: rerun the configured setup commands."""

import click

from bonsai.cli.ensure import Ensure
from bonsai.cli.output import user_output
from bonsai.core.context import BonsaiContext
from bonsai.core.setup_runner import run_setup_commands


@click.command("setup")
@click.pass_obj
def setup_cmd(ctx: BonsaiContext) -> None:
    """Run setup commands at the root of the current worktree.

    Useful for retrying after a failed setup during grow, or for setting up
    a worktree that was created by hand.
    """
    repo = Ensure.in_repo(ctx)
    config = Ensure.config_loaded(ctx, repo)
    commands = config.setup.commands

    if not commands:
        ctx.feedback.warning("No setup commands configured.")
        config_path = ctx.config_store.path_for(repo.root)
        user_output(f"Edit your config to add commands: {click.style(str(config_path), dim=True)}")
        return

    worktree_root = Ensure.not_none(
        ctx.git_ops.get_toplevel(ctx.cwd), "Could not determine git repository root."
    )

    user_output(click.style(f"Running {len(commands)} setup command(s)...", bold=True))
    result = run_setup_commands(ctx.shell_ops, ctx.feedback, commands, worktree_root)

    user_output("")
    if result.success:
        ctx.feedback.success("Setup completed successfully!")
        return

    ctx.feedback.error(
        f"Setup failed. Fix the issue and run {click.style('bonsai setup', fg='cyan')} again."
    )
    raise SystemExit(1)
