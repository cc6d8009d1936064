"""Custom Click help formatter for organized command display."""

import click

from bonsai.cli.alias import get_aliases


class GroupedCommandGroup(click.Group):
    """Click Group that organizes commands into logical sections in help output.

    Commands are organized into sections based on their usage patterns:
    - Worktrees: the grow/prune/list lifecycle
    - Workspace: commands acting on the current worktree
    - Configuration: init and config
    - Aliases: alternative names for the commands above
    """

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format commands into organized sections."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd))

        if not commands:
            return

        lifecycle = ["grow", "prune", "list"]
        workspace = ["open", "setup"]
        configuration = ["init", "config"]

        lifecycle_cmds = []
        workspace_cmds = []
        config_cmds = []
        alias_cmds = []

        for name, cmd in commands:
            if name in lifecycle:
                lifecycle_cmds.append((name, cmd))
            elif name in workspace:
                workspace_cmds.append((name, cmd))
            elif name in configuration:
                config_cmds.append((name, cmd))
            else:
                alias_cmds.append((name, cmd))

        if lifecycle_cmds:
            with formatter.section("Worktrees"):
                self._format_command_list(ctx, formatter, lifecycle_cmds)

        if workspace_cmds:
            with formatter.section("Workspace"):
                self._format_command_list(ctx, formatter, workspace_cmds)

        if config_cmds:
            with formatter.section("Configuration"):
                self._format_command_list(ctx, formatter, config_cmds)

        if alias_cmds:
            with formatter.section("Aliases"):
                self._format_alias_list(formatter, alias_cmds)

    def _format_command_list(
        self,
        ctx: click.Context,
        formatter: click.HelpFormatter,
        commands: list[tuple[str, click.Command]],
    ) -> None:
        """Format a list of commands with their help text."""
        rows = []
        for name, cmd in commands:
            help_text = cmd.get_short_help_str(limit=formatter.width)
            aliases = get_aliases(cmd)
            if aliases:
                help_text = f"{help_text} [{', '.join(aliases)}]"
            rows.append((name, help_text))

        if rows:
            formatter.write_dl(rows)

    def _format_alias_list(
        self,
        formatter: click.HelpFormatter,
        commands: list[tuple[str, click.Command]],
    ) -> None:
        rows = [(name, f"Alias for '{cmd.name}'") for name, cmd in commands]
        formatter.write_dl(rows)
