"""Tests for repository discovery."""

from pathlib import Path

from bonsai.core.repo_discovery import (
    NoRepoSentinel,
    RepoContext,
    default_worktree_base,
    discover_repo_or_sentinel,
)
from tests.fakes.gitops import FakeGitOps


def test_linked_worktree_resolves_to_main_checkout(tmp_path: Path) -> None:
    main = tmp_path / "app"
    linked = tmp_path / "app.worktrees" / "topic"
    git_ops = FakeGitOps(
        existing_paths={linked},
        git_common_dirs={linked.resolve(): main / ".git"},
    )

    repo = discover_repo_or_sentinel(linked, git_ops)

    assert repo == RepoContext(root=main.resolve(), repo_name="app")


def test_falls_back_to_git_directory_walk(tmp_path: Path) -> None:
    root = tmp_path.resolve() / "app"
    nested = root / "src" / "pkg"
    git_ops = FakeGitOps(
        existing_paths={nested, root / ".git"},
        directories={root / ".git"},
    )

    repo = discover_repo_or_sentinel(nested, git_ops)

    assert isinstance(repo, RepoContext)
    assert repo.root == root


def test_outside_repository_returns_sentinel(tmp_path: Path) -> None:
    git_ops = FakeGitOps(existing_paths={tmp_path})

    assert isinstance(discover_repo_or_sentinel(tmp_path, git_ops), NoRepoSentinel)


def test_missing_start_path_returns_sentinel() -> None:
    result = discover_repo_or_sentinel(Path("/does/not/exist"), FakeGitOps())

    assert isinstance(result, NoRepoSentinel)
    assert "does not exist" in result.message


def test_default_worktree_base_is_sibling() -> None:
    assert default_worktree_base(Path("/src/app")) == Path("/src/app.worktrees")
