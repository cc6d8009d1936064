"""Tests for the grow state machine."""

import pytest

from bonsai.core.errors import (
    BranchCheckedOutElsewhere,
    Cancelled,
    InvalidBranchName,
    MissingStartPoint,
    WorktreeAlreadyExists,
    WorktreeCreateFailed,
)
from bonsai.core.gitops import BranchStatus
from bonsai.core.lifecycle import grow_worktree, plan_grow
from tests.fakes.context import (
    REPO_ROOT,
    WORKTREE_BASE,
    make_settings,
    managed_worktree,
    root_worktree,
)
from tests.fakes.feedback import FakeUserFeedback
from tests.fakes.gitops import FakeGitOps
from tests.fakes.prompter import FakePrompter


def _git(**kwargs) -> FakeGitOps:
    worktrees = kwargs.pop("worktrees", [])
    return FakeGitOps(worktrees={REPO_ROOT: [root_worktree(), *worktrees]}, **kwargs)


def test_new_branch_is_created_from_origin_main() -> None:
    git_ops = _git()
    feedback = FakeUserFeedback()

    result = grow_worktree(git_ops, FakePrompter(), feedback, make_settings(), "feature/auth")

    expected = WORKTREE_BASE / "feature-auth"
    assert result.path == expected
    assert result.branch_status is BranchStatus.NEITHER_EXISTS
    assert git_ops.added_worktrees == [(expected, "feature/auth", "origin/main", True)]
    assert git_ops.fetch_calls == [REPO_ROOT]
    assert "Creating new branch" in feedback.text()


def test_local_branch_is_checked_out_without_creating() -> None:
    git_ops = _git(local_branches={"topic"})

    result = grow_worktree(git_ops, FakePrompter(), FakeUserFeedback(), make_settings(), "topic")

    assert result.branch_status is BranchStatus.LOCAL_ONLY
    assert git_ops.added_worktrees == [(WORKTREE_BASE / "topic", "topic", None, False)]


def test_branch_on_both_sides_uses_local() -> None:
    git_ops = _git(local_branches={"topic"}, remote_branches={"topic"})

    result = grow_worktree(git_ops, FakePrompter(), FakeUserFeedback(), make_settings(), "topic")

    assert result.branch_status is BranchStatus.BOTH
    assert git_ops.added_worktrees == [(WORKTREE_BASE / "topic", "topic", None, False)]


def test_remote_only_branch_creates_tracking_branch() -> None:
    git_ops = _git(remote_branches={"fix/bug"})
    feedback = FakeUserFeedback()

    grow_worktree(git_ops, FakePrompter(), feedback, make_settings(), "fix/bug")

    assert git_ops.added_worktrees == [
        (WORKTREE_BASE / "fix-bug", "fix/bug", "origin/fix/bug", True)
    ]
    assert "Tracking remote branch" in feedback.text()


def test_invalid_name_performs_no_git_calls() -> None:
    git_ops = _git()

    with pytest.raises(InvalidBranchName):
        grow_worktree(git_ops, FakePrompter(), FakeUserFeedback(), make_settings(), "-rf")

    assert git_ops.fetch_calls == []
    assert git_ops.mutation_count == 0


def test_existing_target_folder_aborts_before_fetch() -> None:
    git_ops = _git(existing_paths={WORKTREE_BASE / "topic"})

    with pytest.raises(WorktreeAlreadyExists) as exc_info:
        grow_worktree(git_ops, FakePrompter(), FakeUserFeedback(), make_settings(), "topic")

    assert exc_info.value.path == WORKTREE_BASE / "topic"
    assert git_ops.fetch_calls == []
    assert git_ops.mutation_count == 0


def test_fetch_failure_is_tolerated() -> None:
    git_ops = _git(fetch_fails=True)
    feedback = FakeUserFeedback()

    grow_worktree(git_ops, FakePrompter(), feedback, make_settings(), "topic")

    assert len(git_ops.added_worktrees) == 1
    assert any("Could not fetch" in msg for msg in feedback.by_level("warning"))


def test_branch_checked_out_in_live_worktree_aborts() -> None:
    live = managed_worktree("topic")
    git_ops = _git(local_branches={"topic"}, worktrees=[live])
    prompter = FakePrompter()

    with pytest.raises(BranchCheckedOutElsewhere) as exc_info:
        grow_worktree(
            git_ops, prompter, FakeUserFeedback(), make_settings(), "topic"
        )

    assert exc_info.value.path == live.path
    assert git_ops.mutation_count == 0
    assert prompter.prompt_count == 0


def test_branch_checked_out_in_root_worktree_aborts() -> None:
    git_ops = _git(local_branches={"main"})

    with pytest.raises(BranchCheckedOutElsewhere):
        grow_worktree(git_ops, FakePrompter(), FakeUserFeedback(), make_settings(), "main")

    assert git_ops.mutation_count == 0


def test_stale_reference_pruned_after_confirmation() -> None:
    stale = managed_worktree("topic", exists_on_disk=False)
    git_ops = _git(local_branches={"topic"}, worktrees=[stale])
    prompter = FakePrompter(confirms=[True])
    feedback = FakeUserFeedback()

    result = grow_worktree(git_ops, prompter, feedback, make_settings(), "topic")

    assert result.pruned_stale
    assert git_ops.prune_calls == [REPO_ROOT]
    assert git_ops.added_worktrees == [(WORKTREE_BASE / "topic", "topic", None, False)]
    assert prompter.confirm_prompts == ["Prune stale worktree references and continue?"]
    assert "ALL stale worktree references" in feedback.text()


def test_declining_stale_prune_mutates_nothing() -> None:
    stale = managed_worktree("topic", exists_on_disk=False)
    git_ops = _git(local_branches={"topic"}, worktrees=[stale])

    with pytest.raises(Cancelled) as exc_info:
        grow_worktree(
            git_ops, FakePrompter(confirms=[False]), FakeUserFeedback(), make_settings(), "topic"
        )

    assert "git worktree prune" in exc_info.value.message
    assert git_ops.mutation_count == 0


def test_missing_start_point_aborts_before_stale_prune() -> None:
    stale = managed_worktree("brand-new", exists_on_disk=False)
    git_ops = _git(worktrees=[stale])
    prompter = FakePrompter(confirms=[True])

    with pytest.raises(MissingStartPoint):
        grow_worktree(
            git_ops, prompter, FakeUserFeedback(), make_settings(main_branch=None), "brand-new"
        )

    assert git_ops.mutation_count == 0
    assert prompter.prompt_count == 0


def test_missing_start_point_only_matters_for_new_branches() -> None:
    git_ops = _git(local_branches={"topic"})

    grow_worktree(
        git_ops, FakePrompter(), FakeUserFeedback(), make_settings(main_branch=None), "topic"
    )

    assert len(git_ops.added_worktrees) == 1


def test_create_failure_is_wrapped_with_path() -> None:
    git_ops = _git(add_worktree_stderr="fatal: could not lock")

    with pytest.raises(WorktreeCreateFailed) as exc_info:
        grow_worktree(git_ops, FakePrompter(), FakeUserFeedback(), make_settings(), "topic")

    assert exc_info.value.path == WORKTREE_BASE / "topic"
    assert "could not lock" in exc_info.value.message


def test_plan_grow_is_read_only() -> None:
    stale = managed_worktree("topic", exists_on_disk=False)
    git_ops = _git(local_branches={"topic"}, worktrees=[stale])

    plan = plan_grow(git_ops, make_settings(), "topic")

    assert plan.branch_status is BranchStatus.LOCAL_ONLY
    assert plan.conflicting_worktree == stale
    assert plan.requires_stale_prune
    assert plan.start_point is None
    assert git_ops.mutation_count == 0
