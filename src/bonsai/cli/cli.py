import logging
import os

import click

from bonsai.cli.alias import register_with_aliases
from bonsai.cli.commands.config_cmd import config_cmd
from bonsai.cli.commands.grow import grow_cmd
from bonsai.cli.commands.init import init_cmd
from bonsai.cli.commands.list_cmd import list_cmd
from bonsai.cli.commands.open_cmd import open_cmd
from bonsai.cli.commands.prune import prune_cmd
from bonsai.cli.commands.setup import setup_cmd
from bonsai.cli.help_formatter import GroupedCommandGroup
from bonsai.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

# Enable debug logging if BONSAI_DEBUG environment variable is set
if os.getenv("BONSAI_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(cls=GroupedCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="bonsai")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the git worktree commands that would run without executing them.",
)
@click.pass_context
def cli(ctx: click.Context, dry_run: bool) -> None:
    """Grow and prune git worktrees next to your repository."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run)


register_with_aliases(cli, grow_cmd)  # Has @alias("add", "new")
register_with_aliases(cli, prune_cmd)  # Has @alias("rm", "remove")
register_with_aliases(cli, list_cmd)  # Has @alias("ls")
register_with_aliases(cli, open_cmd)  # Has @alias("bloom")
cli.add_command(setup_cmd)
cli.add_command(init_cmd)
cli.add_command(config_cmd)


def main() -> None:
    """CLI entry point used by the `bonsai` console script."""
    cli()
