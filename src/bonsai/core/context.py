"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from bonsai.core.config import ConfigStore, FilesystemConfigStore
from bonsai.core.editor import EditorOps, RealEditorOps
from bonsai.core.gitops import DryRunGitOps, GitOps, RealGitOps
from bonsai.core.prompts import ClickPrompter, Prompter
from bonsai.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from bonsai.core.shell_ops import RealShellOps, ShellOps
from bonsai.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class BonsaiContext:
    """Immutable context holding all dependencies for bonsai operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    Config is not loaded here: `init` must run before any config exists,
    so commands load it through config_store when they need it.
    """

    git_ops: GitOps
    editor_ops: EditorOps
    shell_ops: ShellOps
    config_store: ConfigStore
    prompter: Prompter
    feedback: UserFeedback
    cwd: Path  # Current working directory at CLI invocation
    repo: RepoContext | NoRepoSentinel
    dry_run: bool


def create_context(*, dry_run: bool) -> BonsaiContext:
    """Create production context with real implementations.

    Args:
        dry_run: If True, wrap git operations so that worktree mutations are
                 printed instead of executed

    Returns:
        BonsaiContext with real implementations
    """
    cwd = Path.cwd()

    git_ops: GitOps = RealGitOps()
    repo = discover_repo_or_sentinel(cwd, git_ops)

    if dry_run:
        git_ops = DryRunGitOps(git_ops)

    return BonsaiContext(
        git_ops=git_ops,
        editor_ops=RealEditorOps(),
        shell_ops=RealShellOps(),
        config_store=FilesystemConfigStore(read_only=dry_run),
        prompter=ClickPrompter(),
        feedback=InteractiveFeedback(),
        cwd=cwd,
        repo=repo,
        dry_run=dry_run,
    )
