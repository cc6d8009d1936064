"""Repository discovery functionality.

Discovers git repository information from a given path without requiring
a full BonsaiContext (enables config loading before context creation).
"""

from dataclasses import dataclass
from pathlib import Path

from bonsai.core.gitops import GitOps


@dataclass(frozen=True)
class RepoContext:
    """The main checkout of the repository bonsai is running in.

    When invoked from inside a linked worktree, root still points at the
    main checkout so that config lookup and worktree commands agree.
    """

    root: Path
    repo_name: str


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path, git_ops: GitOps) -> RepoContext | NoRepoSentinel:
    """Walk up from `cwd` to find the main repository root.

    Uses `git rev-parse --git-common-dir` so linked worktrees resolve to the
    main checkout; falls back to looking for a `.git` directory.

    Args:
        cwd: Current working directory to start search from
        git_ops: Git operations interface

    Returns:
        RepoContext if inside a git repository, NoRepoSentinel otherwise
    """
    if not git_ops.path_exists(cwd):
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    cur = cwd.resolve()

    root: Path | None = None
    git_common_dir = git_ops.get_git_common_dir(cur)
    if git_common_dir is not None:
        root = git_common_dir.parent.resolve()
    else:
        for parent in [cur, *cur.parents]:
            git_path = parent / ".git"
            if not git_ops.path_exists(git_path):
                continue

            if git_ops.is_dir(git_path):
                root = parent
                break

    if root is None:
        return NoRepoSentinel(message="Not inside a git repository (no .git found up the tree)")

    return RepoContext(root=root, repo_name=root.name)


def default_worktree_base(repo_root: Path) -> Path:
    """Sibling directory `<repo>.worktrees` next to the main checkout."""
    return repo_root.parent / f"{repo_root.name}.worktrees"
