"""High-level git operations interface.

This module provides a narrow abstraction over git subprocess calls so the
worktree lifecycle controller can be tested against in-memory fakes.

Architecture:
- GitOps: Abstract base class defining the interface
- RealGitOps: Production implementation using subprocess
- DryRunGitOps: Wrapper that prints mutations instead of executing them
- Standalone functions: Pure helpers built on top of the interface
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import click

from bonsai.cli.output import user_output
from bonsai.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a single git worktree.

    exists_on_disk distinguishes a live worktree from a stale reference whose
    directory was deleted outside of git.
    """

    path: Path
    branch: str | None
    is_root: bool = False
    exists_on_disk: bool = True


class BranchStatus(Enum):
    LOCAL_ONLY = "local_only"
    REMOTE_ONLY = "remote_only"
    BOTH = "both"
    NEITHER_EXISTS = "neither_exists"


def parse_worktree_porcelain(output: str) -> list[tuple[Path, str | None]]:
    """Parse `git worktree list --porcelain` output into (path, branch) pairs.

    Entries are separated by blank lines. Detached worktrees have no
    "branch" line and yield None.
    """
    entries: list[tuple[Path, str | None]] = []
    current_path: Path | None = None
    current_branch: str | None = None

    for line in output.splitlines():
        line = line.strip()
        if line.startswith("worktree "):
            current_path = Path(line.split(maxsplit=1)[1])
            current_branch = None
        elif line.startswith("branch "):
            if current_path is None:
                continue
            branch_ref = line.split(maxsplit=1)[1]
            current_branch = branch_ref.removeprefix("refs/heads/")
        elif line == "" and current_path is not None:
            entries.append((current_path, current_branch))
            current_path = None
            current_branch = None

    if current_path is not None:
        entries.append((current_path, current_branch))

    return entries


def find_worktree_for_branch(worktrees: list[WorktreeInfo], branch: str) -> WorktreeInfo | None:
    """Find the worktree that has the given branch checked out.

    Args:
        worktrees: List of worktrees to search
        branch: Branch name to find

    Returns:
        The matching WorktreeInfo (including exists_on_disk), or None
    """
    for wt in worktrees:
        if wt.branch == branch:
            return wt
    return None


def classify_branch(*, local: bool, remote: bool) -> BranchStatus:
    if local and remote:
        return BranchStatus.BOTH
    if local:
        return BranchStatus.LOCAL_ONLY
    if remote:
        return BranchStatus.REMOTE_ONLY
    return BranchStatus.NEITHER_EXISTS


# ============================================================================
# Abstract Interface
# ============================================================================


class GitOps(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees in the repository.

        The first entry is the root worktree. Each entry's exists_on_disk is
        derived by checking the path on the filesystem at call time.

        Raises:
            GitError: If git exits non-zero (e.g. not inside a repository)
        """
        ...

    @abstractmethod
    def local_branch_exists(self, repo_root: Path, branch: str) -> bool:
        """Check whether `git rev-parse --verify <branch>` succeeds."""
        ...

    @abstractmethod
    def remote_branch_exists(self, repo_root: Path, branch: str) -> bool:
        """Check whether `git rev-parse --verify origin/<branch>` succeeds."""
        ...

    @abstractmethod
    def get_status(self, worktree_path: Path) -> str:
        """Get raw `git status --porcelain` output for a worktree.

        Returns:
            Porcelain output; empty string when the worktree is clean

        Raises:
            GitError: If the status check fails (e.g. invalid path)
        """
        ...

    @abstractmethod
    def detect_default_main_branch(self, repo_root: Path) -> str | None:
        """Probe origin/main then origin/master.

        Returns:
            "main", "master", or None if neither remote branch resolves
        """
        ...

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory (shared by all worktrees)."""
        ...

    @abstractmethod
    def get_toplevel(self, cwd: Path) -> Path | None:
        """Get the root of the worktree containing cwd."""
        ...

    @abstractmethod
    def fetch_all(self, repo_root: Path) -> None:
        """Run `git fetch --all --prune`.

        Raises:
            GitError: If fetch fails (network error, no remote, ...)
        """
        ...

    @abstractmethod
    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        """Add a new git worktree.

        Args:
            repo_root: Path to the git repository root
            path: Path where the worktree should be created
            branch: Branch to check out or create
            ref: Start point for a newly created branch
            create_branch: True to create `branch` from `ref`, False to check
                out the existing branch

        Raises:
            GitError: If git fails to create the worktree
        """
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree.

        Args:
            repo_root: Path to the git repository root
            path: Path to the worktree to remove
            force: True to force removal even if worktree has uncommitted changes

        Raises:
            GitError: If git refuses or fails to remove the worktree
        """
        ...

    @abstractmethod
    def prune_worktrees(self, repo_root: Path) -> None:
        """Prune stale worktree metadata for the whole repository.

        git has no way to prune a single entry, so this affects every stale
        reference.
        """
        ...

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem.

        In production this delegates to Path.exists(). Fakes check an
        in-memory set of paths to avoid filesystem I/O.
        """
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    @abstractmethod
    def path_mtime(self, path: Path) -> float | None:
        """Modification time of path, or None if it cannot be stat'd."""
        ...


# ============================================================================
# Standalone helpers
# ============================================================================


def branch_exists(git_ops: GitOps, repo_root: Path, branch: str) -> bool:
    """True if the branch exists locally or on origin."""
    if git_ops.local_branch_exists(repo_root, branch):
        return True
    return git_ops.remote_branch_exists(repo_root, branch)


def is_remote_only_branch(git_ops: GitOps, repo_root: Path, branch: str) -> bool:
    """True if origin/<branch> resolves but the local branch does not."""
    local = git_ops.local_branch_exists(repo_root, branch)
    remote = git_ops.remote_branch_exists(repo_root, branch)
    return not local and remote


def get_branch_status(git_ops: GitOps, repo_root: Path, branch: str) -> BranchStatus:
    return classify_branch(
        local=git_ops.local_branch_exists(repo_root, branch),
        remote=git_ops.remote_branch_exists(repo_root, branch),
    )


# ============================================================================
# Production Implementation
# ============================================================================


class RealGitOps(GitOps):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        result = run_subprocess_with_context(
            ["git", "worktree", "list", "--porcelain"],
            operation_context="list worktrees",
            cwd=repo_root,
        )

        worktrees: list[WorktreeInfo] = []
        for index, (path, branch) in enumerate(parse_worktree_porcelain(result.stdout)):
            worktrees.append(
                WorktreeInfo(
                    path=path,
                    branch=branch,
                    is_root=index == 0,
                    exists_on_disk=path.is_dir(),
                )
            )
        return worktrees

    def _verify_ref(self, repo_root: Path, ref: str) -> bool:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", ref],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def local_branch_exists(self, repo_root: Path, branch: str) -> bool:
        return self._verify_ref(repo_root, branch)

    def remote_branch_exists(self, repo_root: Path, branch: str) -> bool:
        return self._verify_ref(repo_root, f"{DEFAULT_REMOTE}/{branch}")

    def get_status(self, worktree_path: Path) -> str:
        result = run_subprocess_with_context(
            ["git", "-C", str(worktree_path), "status", "--porcelain"],
            operation_context="get worktree status",
        )
        # Leading spaces are significant in porcelain codes; only drop the
        # trailing newline.
        return result.stdout.rstrip("\n")

    def detect_default_main_branch(self, repo_root: Path) -> str | None:
        for candidate in ("main", "master"):
            if self._verify_ref(repo_root, f"{DEFAULT_REMOTE}/{candidate}"):
                return candidate
        return None

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir
        return git_dir.resolve()

    def get_toplevel(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def fetch_all(self, repo_root: Path) -> None:
        run_subprocess_with_context(
            ["git", "fetch", "--all", "--prune"],
            operation_context="fetch from remote",
            cwd=repo_root,
        )

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        if create_branch:
            cmd = ["git", "worktree", "add", "-b", branch, str(path)]
            if ref:
                cmd.append(ref)
        else:
            cmd = ["git", "worktree", "add", str(path), branch]

        run_subprocess_with_context(cmd, operation_context="create worktree", cwd=repo_root)

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        cmd = ["git", "worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        run_subprocess_with_context(cmd, operation_context="remove worktree", cwd=repo_root)

    def prune_worktrees(self, repo_root: Path) -> None:
        run_subprocess_with_context(
            ["git", "worktree", "prune"],
            operation_context="prune stale worktrees",
            cwd=repo_root,
        )

    def path_exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def path_mtime(self, path: Path) -> float | None:
        try:
            return path.stat().st_mtime
        except OSError:
            return None


# ============================================================================
# Dry-run Wrapper
# ============================================================================


class DryRunGitOps(GitOps):
    """Wrapper that prints mutating operations instead of executing them.

    Read-only operations are delegated to the wrapped implementation.

    Usage:
        real_ops = RealGitOps()
        dry_run_ops = DryRunGitOps(real_ops)

        # Prints message instead of removing
        dry_run_ops.remove_worktree(repo_root, path, force=False)
    """

    def __init__(self, wrapped: GitOps) -> None:
        self._wrapped = wrapped

    def _announce(self, command: str) -> None:
        user_output(click.style("[DRY RUN] ", fg="yellow") + f"Would run: {command}")

    # Read-only operations: delegate to wrapped implementation

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        return self._wrapped.list_worktrees(repo_root)

    def local_branch_exists(self, repo_root: Path, branch: str) -> bool:
        return self._wrapped.local_branch_exists(repo_root, branch)

    def remote_branch_exists(self, repo_root: Path, branch: str) -> bool:
        return self._wrapped.remote_branch_exists(repo_root, branch)

    def get_status(self, worktree_path: Path) -> str:
        return self._wrapped.get_status(worktree_path)

    def detect_default_main_branch(self, repo_root: Path) -> str | None:
        return self._wrapped.detect_default_main_branch(repo_root)

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        return self._wrapped.get_git_common_dir(cwd)

    def get_toplevel(self, cwd: Path) -> Path | None:
        return self._wrapped.get_toplevel(cwd)

    def fetch_all(self, repo_root: Path) -> None:
        # Fetch only updates remote-tracking refs; the decisions that follow
        # need them to be current.
        self._wrapped.fetch_all(repo_root)

    def path_exists(self, path: Path) -> bool:
        return self._wrapped.path_exists(path)

    def is_dir(self, path: Path) -> bool:
        return self._wrapped.is_dir(path)

    def path_mtime(self, path: Path) -> float | None:
        return self._wrapped.path_mtime(path)

    # Destructive operations: print dry-run message instead of executing

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        if create_branch:
            base_ref = f" {ref}" if ref else ""
            self._announce(f"git worktree add -b {branch} {path}{base_ref}")
        else:
            self._announce(f"git worktree add {path} {branch}")

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        force_flag = "--force " if force else ""
        self._announce(f"git worktree remove {force_flag}{path}")

    def prune_worktrees(self, repo_root: Path) -> None:
        self._announce("git worktree prune")
