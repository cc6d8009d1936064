"""bonsai init: interactive configuration wizard."""

import os
from pathlib import Path

import click

from bonsai.cli.ensure import Ensure, exit_cancelled
from bonsai.cli.output import user_output
from bonsai.core.config import (
    DEFAULT_MAIN_BRANCH,
    BehaviorSection,
    BonsaiConfig,
    EditorSection,
    PostCreationAction,
    RepoSection,
    SetupSection,
    parse_setup_commands,
    resolve_worktree_base,
)
from bonsai.core.context import BonsaiContext
from bonsai.core.editor import EditorName
from bonsai.core.errors import GitError
from bonsai.core.prompts import SelectOption
from bonsai.core.repo_discovery import default_worktree_base

EDITOR_OPTIONS = [
    SelectOption(value=EditorName.CURSOR.value, label="Cursor", hint="cursor CLI"),
    SelectOption(value=EditorName.VSCODE.value, label="VS Code", hint="code CLI"),
    SelectOption(value=EditorName.CLAUDE.value, label="Claude Code", hint="claude CLI"),
]

POST_CREATION_OPTIONS = [
    SelectOption(
        value=PostCreationAction.NOTHING.value,
        label="Do nothing (default)",
        hint="You navigate manually when ready",
    ),
    SelectOption(
        value=PostCreationAction.OPEN_EDITOR.value,
        label="Open editor",
        hint="Immediately open the editor in the new worktree",
    ),
]


def _detect_main_branch(ctx: BonsaiContext, repo_root: Path) -> str:
    try:
        ctx.git_ops.fetch_all(repo_root)
    except GitError:
        ctx.feedback.warning("Could not fetch from remote (continuing anyway)")
    return ctx.git_ops.detect_default_main_branch(repo_root) or DEFAULT_MAIN_BRANCH


def _prompt_config(ctx: BonsaiContext, repo_root: Path, main_default: str) -> BonsaiConfig:
    repo_path = ctx.prompter.text("Git repository path", default=str(repo_root))
    worktree_base = ctx.prompter.text(
        "Worktree base directory", default=str(default_worktree_base(repo_root))
    )
    main_branch = ctx.prompter.text(
        "Main branch (new worktrees start from the latest version of this branch)",
        default=main_default,
    )
    editor = ctx.prompter.select(
        "Editor to open worktrees", EDITOR_OPTIONS, default=EditorName.CURSOR.value
    )
    setup_raw = ctx.prompter.text("Setup commands (comma-separated, optional)", default="")
    navigate = ctx.prompter.confirm(
        "After 'bonsai grow', cd into the new worktree? (requires shell integration)",
        default=False,
    )
    post_creation = ctx.prompter.select(
        "After creating a worktree, what should bonsai do?",
        POST_CREATION_OPTIONS,
        default=PostCreationAction.NOTHING.value,
    )

    path = Path(os.path.normpath(ctx.cwd / Path(repo_path).expanduser()))
    return BonsaiConfig(
        repo=RepoSection(
            path=path,
            worktree_base=resolve_worktree_base(path, Path(worktree_base)),
            main_branch=main_branch.strip() or DEFAULT_MAIN_BRANCH,
        ),
        editor=EditorSection(name=EditorName(editor)),
        setup=SetupSection(commands=parse_setup_commands(setup_raw)),
        behavior=BehaviorSection(
            navigate_after_grow=navigate,
            post_creation_action=PostCreationAction(post_creation),
        ),
    )


def _print_summary(config: BonsaiConfig, config_path: Path) -> None:
    def row(label: str, value: str) -> None:
        user_output(f"  {click.style(label, dim=True)} {value}")

    user_output("")
    user_output(click.style("Configuration", bold=True))
    row("Config file:", str(config_path))
    row("Worktree base:", str(config.repo.worktree_base))
    row("Main branch:", config.repo.main_branch)
    row("Editor:", config.editor.name.display_name)
    if config.setup.commands:
        row("Setup commands:", f"{len(config.setup.commands)} command(s)")
    opens_editor = config.behavior.post_creation_action is PostCreationAction.OPEN_EDITOR
    row("Post-creation action:", "open editor" if opens_editor else "do nothing")
    row("Navigate after grow:", "yes" if config.behavior.navigate_after_grow else "no")


@click.command("init")
@click.pass_obj
def init_cmd(ctx: BonsaiContext) -> None:
    """Create the bonsai config for the current repository."""
    repo = Ensure.in_repo(ctx)

    if ctx.config_store.exists(repo.root):
        existing = ctx.config_store.path_for(repo.root)
        overwrite = ctx.prompter.confirm(
            f"Config already exists at {existing}. Overwrite?", default=False
        )
        if not overwrite:
            exit_cancelled("Setup cancelled.")

    main_default = _detect_main_branch(ctx, repo.root)
    config = _prompt_config(ctx, repo.root, main_default)

    if not ctx.editor_ops.is_available(config.editor.name):
        ctx.feedback.warning(
            f"Warning: {config.editor.name.command} CLI not found in PATH. "
            "You may need to install it."
        )

    if ctx.dry_run:
        target = ctx.config_store.path_for(config.repo.path)
        user_output(click.style("[DRY RUN] ", fg="yellow") + f"Would write config to {target}")
        return

    config_path = ctx.config_store.save(config)
    ctx.feedback.success("Configuration saved")
    _print_summary(config, config_path)

    grow_hint = click.style("bonsai grow <branch-name>", fg="cyan")
    user_output("")
    user_output(f"Done! Run {grow_hint} to create a worktree.")
