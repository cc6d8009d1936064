"""Factory functions for creating test contexts."""

from pathlib import Path

from bonsai.core.config import (
    BehaviorSection,
    BonsaiConfig,
    EditorSection,
    PostCreationAction,
    RepoSection,
    SetupSection,
)
from bonsai.core.context import BonsaiContext
from bonsai.core.editor import EditorName, EditorOps
from bonsai.core.gitops import GitOps, WorktreeInfo
from bonsai.core.lifecycle import WorktreeSettings
from bonsai.core.prompts import Prompter
from bonsai.core.repo_discovery import NoRepoSentinel, RepoContext
from bonsai.core.shell_ops import ShellOps
from bonsai.core.user_feedback import InteractiveFeedback, UserFeedback
from tests.fakes.config_store import FakeConfigStore
from tests.fakes.editor import FakeEditorOps
from tests.fakes.gitops import FakeGitOps
from tests.fakes.prompter import FakePrompter
from tests.fakes.shell_ops import FakeShellOps

REPO_ROOT = Path("/repos/app")
WORKTREE_BASE = Path("/repos/app.worktrees")


def make_config(
    *,
    main_branch: str = "main",
    editor: EditorName = EditorName.CURSOR,
    setup_commands: list[str] | None = None,
    navigate_after_grow: bool = False,
    post_creation_action: PostCreationAction = PostCreationAction.NOTHING,
) -> BonsaiConfig:
    """Config for REPO_ROOT with worktrees under WORKTREE_BASE."""
    return BonsaiConfig(
        repo=RepoSection(path=REPO_ROOT, worktree_base=WORKTREE_BASE, main_branch=main_branch),
        editor=EditorSection(name=editor),
        setup=SetupSection(commands=setup_commands or []),
        behavior=BehaviorSection(
            navigate_after_grow=navigate_after_grow,
            post_creation_action=post_creation_action,
        ),
    )


def make_settings(main_branch: str | None = "main") -> WorktreeSettings:
    return WorktreeSettings(
        repo_root=REPO_ROOT, worktree_base=WORKTREE_BASE, main_branch=main_branch
    )


def root_worktree(branch: str = "main") -> WorktreeInfo:
    return WorktreeInfo(path=REPO_ROOT, branch=branch, is_root=True)


def managed_worktree(branch: str, *, exists_on_disk: bool = True) -> WorktreeInfo:
    """A worktree under WORKTREE_BASE at the sanitized branch folder."""
    return WorktreeInfo(
        path=WORKTREE_BASE / branch.replace("/", "-"),
        branch=branch,
        exists_on_disk=exists_on_disk,
    )


def create_test_context(
    *,
    git_ops: GitOps | None = None,
    editor_ops: EditorOps | None = None,
    shell_ops: ShellOps | None = None,
    config_store: FakeConfigStore | None = None,
    config: BonsaiConfig | None = None,
    prompter: Prompter | None = None,
    feedback: UserFeedback | None = None,
    cwd: Path | None = None,
    repo: RepoContext | NoRepoSentinel | None = None,
    dry_run: bool = False,
) -> BonsaiContext:
    """Create test context with optional pre-configured ops.

    Args:
        git_ops: Defaults to an empty FakeGitOps
        editor_ops: Defaults to a FakeEditorOps with every editor available
        shell_ops: Defaults to a FakeShellOps where every command succeeds
        config_store: Defaults to a FakeConfigStore holding `config`
        config: Config stored for REPO_ROOT when config_store is not given
                (defaults to make_config())
        prompter: Defaults to a FakePrompter with no scripted answers
        feedback: Defaults to InteractiveFeedback so output reaches CliRunner
        cwd: Defaults to REPO_ROOT
        repo: Defaults to a RepoContext for REPO_ROOT
        dry_run: Whether to set dry_run mode

    Returns:
        Frozen BonsaiContext for use in tests

    Example:
        >>> git_ops = FakeGitOps(worktrees={REPO_ROOT: [root_worktree()]})
        >>> ctx = create_test_context(git_ops=git_ops)
    """
    if config_store is None:
        config_store = FakeConfigStore(configs={REPO_ROOT: config or make_config()})

    return BonsaiContext(
        git_ops=git_ops or FakeGitOps(),
        editor_ops=editor_ops or FakeEditorOps(),
        shell_ops=shell_ops or FakeShellOps(),
        config_store=config_store,
        prompter=prompter or FakePrompter(),
        feedback=feedback or InteractiveFeedback(),
        cwd=cwd or REPO_ROOT,
        repo=repo or RepoContext(root=REPO_ROOT, repo_name=REPO_ROOT.name),
        dry_run=dry_run,
    )
