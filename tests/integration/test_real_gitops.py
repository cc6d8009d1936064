"""Integration tests for the grow/prune lifecycle against real git.

These tests create a real repository cloned from a local "origin" so that
RealGitOps argv, porcelain parsing and on-disk staleness are exercised
end to end. Prompts and output still go through fakes.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from bonsai.core.errors import Cancelled
from bonsai.core.gitops import BranchStatus, RealGitOps
from bonsai.core.lifecycle import GrowResult, WorktreeSettings, grow_worktree, prune_worktree
from bonsai.core.worktree_status import ChangeKind, parse_porcelain_status
from tests.fakes.feedback import FakeUserFeedback
from tests.fakes.prompter import FakePrompter

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def settings(tmp_path: Path) -> WorktreeSettings:
    """A clone of a local origin that has `main` and a remote-only `feature/x`."""
    root = tmp_path.resolve()
    origin = root / "origin"
    origin.mkdir()
    _git(origin, "init", "-b", "main")
    _git(origin, "config", "user.email", "test@example.com")
    _git(origin, "config", "user.name", "Test User")
    (origin / "README.md").write_text("# Test Repository\n", encoding="utf-8")
    _git(origin, "add", "README.md")
    _git(origin, "commit", "-m", "Initial commit")
    _git(origin, "checkout", "-b", "feature/x")
    (origin / "feature.txt").write_text("x\n", encoding="utf-8")
    _git(origin, "add", "feature.txt")
    _git(origin, "commit", "-m", "Feature work")
    _git(origin, "checkout", "main")

    _git(root, "clone", str(origin), "repo")
    return WorktreeSettings(
        repo_root=root / "repo",
        worktree_base=root / "repo.worktrees",
        main_branch="main",
    )


def _grow(
    settings: WorktreeSettings, branch: str, prompter: FakePrompter | None = None
) -> GrowResult:
    return grow_worktree(
        RealGitOps(), prompter or FakePrompter(), FakeUserFeedback(), settings, branch
    )


def test_remote_only_branch_tracks_origin(settings: WorktreeSettings) -> None:
    result = _grow(settings, "feature/x")

    assert result.branch_status is BranchStatus.REMOTE_ONLY
    assert result.path == settings.worktree_base / "feature-x"
    assert (result.path / "feature.txt").is_file()
    upstream = _git(settings.repo_root, "rev-parse", "--abbrev-ref", "feature/x@{upstream}")
    assert upstream == "origin/feature/x"


def test_new_branch_starts_at_origin_main(settings: WorktreeSettings) -> None:
    result = _grow(settings, "new/y")

    assert result.branch_status is BranchStatus.NEITHER_EXISTS
    assert _git(settings.repo_root, "rev-parse", "new/y") == _git(
        settings.repo_root, "rev-parse", "origin/main"
    )
    assert _git(result.path, "branch", "--show-current") == "new/y"


def test_deleted_directory_is_reported_stale(settings: WorktreeSettings) -> None:
    path = _grow(settings, "topic").path
    shutil.rmtree(path)

    worktrees = RealGitOps().list_worktrees(settings.repo_root)

    by_path = {wt.path: wt for wt in worktrees}
    assert by_path[settings.repo_root].is_root
    assert by_path[settings.repo_root].exists_on_disk
    assert by_path[path].branch == "topic"
    assert not by_path[path].exists_on_disk


def test_stale_reference_recovered_after_confirm(settings: WorktreeSettings) -> None:
    path = _grow(settings, "topic").path
    shutil.rmtree(path)
    prompter = FakePrompter(confirms=[True])

    result = _grow(settings, "topic", prompter)

    assert result.pruned_stale
    assert result.branch_status is BranchStatus.LOCAL_ONLY
    assert path.is_dir()
    assert prompter.confirm_prompts == ["Prune stale worktree references and continue?"]


def test_stale_reference_declined_leaves_repo_untouched(settings: WorktreeSettings) -> None:
    path = _grow(settings, "topic").path
    shutil.rmtree(path)
    before = _git(settings.repo_root, "worktree", "list", "--porcelain")

    with pytest.raises(Cancelled):
        _grow(settings, "topic", FakePrompter(confirms=[False]))

    assert _git(settings.repo_root, "worktree", "list", "--porcelain") == before
    assert not path.exists()


def test_status_keeps_leading_space_of_porcelain_codes(settings: WorktreeSettings) -> None:
    path = _grow(settings, "topic").path
    (path / "README.md").write_text("changed\n", encoding="utf-8")

    raw = RealGitOps().get_status(path)

    assert raw == " M README.md"
    assert parse_porcelain_status(raw).entries[0].kind is ChangeKind.MODIFIED


def test_dirty_prune_forces_after_confirm_and_keeps_branch(settings: WorktreeSettings) -> None:
    path = _grow(settings, "topic").path
    (path / "README.md").write_text("changed\n", encoding="utf-8")
    (path / "scratch.txt").write_text("wip\n", encoding="utf-8")
    prompter = FakePrompter(confirms=[True])

    result = prune_worktree(RealGitOps(), prompter, FakeUserFeedback(), settings, path)

    assert result.forced
    assert not path.exists()
    assert prompter.confirm_prompts == ["Force delete worktree with 2 uncommitted change(s)?"]
    assert RealGitOps().local_branch_exists(settings.repo_root, "topic")


def test_clean_prune_never_prompts_and_keeps_branch(settings: WorktreeSettings) -> None:
    path = _grow(settings, "new/y").path
    prompter = FakePrompter()

    result = prune_worktree(RealGitOps(), prompter, FakeUserFeedback(), settings, path)

    assert not result.forced
    assert prompter.prompt_count == 0
    assert not path.exists()
    assert "new/y" in _git(settings.repo_root, "branch", "--list", "new/y")
    worktree_paths = [wt.path for wt in RealGitOps().list_worktrees(settings.repo_root)]
    assert path not in worktree_paths
