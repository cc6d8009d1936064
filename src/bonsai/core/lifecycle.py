"""Worktree lifecycle controller: the grow and prune state machines.

grow:
    ValidateName -> CheckTargetFree -> FetchRemote (best effort)
    -> ClassifyBranch -> CheckConflict [-> StaleRecovery] -> Create

prune:
    ValidateName -> ResolveTarget -> CheckDirty [-> confirm force] -> Remove

Every mutating git call is preceded by the read-only checks that justify it.
Decision points are resolved through a Prompter; declining raises Cancelled
before anything has been mutated. Git state is re-read on every call and
never cached across operations.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import click

from bonsai.core.branch_names import ensure_valid_branch_name, sanitize_branch_name
from bonsai.core.config import BonsaiConfig
from bonsai.core.errors import (
    BonsaiError,
    BranchCheckedOutElsewhere,
    Cancelled,
    GitError,
    MissingStartPoint,
    WorktreeAlreadyExists,
    WorktreeCreateFailed,
    WorktreeNotFound,
    WorktreeRemoveFailed,
)
from bonsai.core.gitops import (
    DEFAULT_REMOTE,
    BranchStatus,
    GitOps,
    WorktreeInfo,
    find_worktree_for_branch,
    get_branch_status,
)
from bonsai.core.prompts import Prompter
from bonsai.core.user_feedback import UserFeedback
from bonsai.core.worktree_status import (
    ChangeKind,
    DirtyStatus,
    StatusEntry,
    parse_porcelain_status,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorktreeSettings:
    """Repository facts the controller needs, threaded explicitly.

    Attributes:
        repo_root: Main checkout of the repository (all git calls run here)
        worktree_base: Directory that holds managed worktrees
        main_branch: Branch new branches start from, or None if unconfigured
    """

    repo_root: Path
    worktree_base: Path
    main_branch: str | None

    def worktree_path_for(self, branch: str) -> Path:
        return self.worktree_base / sanitize_branch_name(branch)

    @property
    def start_point(self) -> str | None:
        if not self.main_branch:
            return None
        return f"{DEFAULT_REMOTE}/{self.main_branch}"


def settings_from_config(config: BonsaiConfig) -> WorktreeSettings:
    return WorktreeSettings(
        repo_root=config.repo.path,
        worktree_base=config.repo.worktree_base,
        main_branch=config.repo.main_branch,
    )


# ============================================================================
# grow
# ============================================================================


@dataclass(frozen=True)
class GrowPlan:
    """Decision record produced mid-grow. Never persisted."""

    branch_status: BranchStatus
    start_point: str | None
    conflicting_worktree: WorktreeInfo | None
    requires_stale_prune: bool


@dataclass(frozen=True)
class GrowResult:
    branch: str
    path: Path
    branch_status: BranchStatus
    pruned_stale: bool


def plan_grow(git_ops: GitOps, settings: WorktreeSettings, branch: str) -> GrowPlan:
    """Classify the branch and look for conflicting worktrees.

    Read-only: performs no git mutation.

    Raises:
        GitError: If the worktree list cannot be read
    """
    branch_status = get_branch_status(git_ops, settings.repo_root, branch)
    logger.debug("Branch %s classified as %s", branch, branch_status.name)

    conflict = find_worktree_for_branch(git_ops.list_worktrees(settings.repo_root), branch)
    start_point = settings.start_point if branch_status is BranchStatus.NEITHER_EXISTS else None

    return GrowPlan(
        branch_status=branch_status,
        start_point=start_point,
        conflicting_worktree=conflict,
        requires_stale_prune=conflict is not None and not conflict.exists_on_disk,
    )


def _describe_branch(
    feedback: UserFeedback, branch: str, plan: GrowPlan, main_branch: str | None
) -> None:
    cyan_branch = click.style(branch, fg="cyan")
    match plan.branch_status:
        case BranchStatus.REMOTE_ONLY:
            remote = click.style(f"{DEFAULT_REMOTE}/{branch}", fg="cyan")
            feedback.info(f"Tracking remote branch: {remote}")
        case BranchStatus.LOCAL_ONLY | BranchStatus.BOTH:
            feedback.info(f"Using existing local branch: {cyan_branch}")
        case BranchStatus.NEITHER_EXISTS:
            base = click.style(main_branch or "?", fg="cyan")
            feedback.info(f"Creating new branch {cyan_branch} from latest {base}")


def _recover_stale_reference(
    git_ops: GitOps,
    prompter: Prompter,
    feedback: UserFeedback,
    settings: WorktreeSettings,
    branch: str,
    stale: WorktreeInfo,
) -> None:
    feedback.warning(
        f"Branch '{branch}' has a stale worktree reference at:\n"
        f"  {stale.path} (directory no longer exists)"
    )
    feedback.warning(
        "Pruning runs 'git worktree prune', which removes ALL stale worktree "
        "references in this repository, not only this one."
    )

    if not prompter.confirm("Prune stale worktree references and continue?", default=True):
        raise Cancelled(
            "Cancelled. Run `git worktree prune` manually to clean up stale references."
        )

    git_ops.prune_worktrees(settings.repo_root)
    feedback.success("Pruned stale worktree references")


def _create_worktree(
    git_ops: GitOps,
    settings: WorktreeSettings,
    branch: str,
    path: Path,
    plan: GrowPlan,
) -> None:
    try:
        match plan.branch_status:
            case BranchStatus.REMOTE_ONLY:
                git_ops.add_worktree(
                    settings.repo_root,
                    path,
                    branch=branch,
                    ref=f"{DEFAULT_REMOTE}/{branch}",
                    create_branch=True,
                )
            case BranchStatus.LOCAL_ONLY | BranchStatus.BOTH:
                git_ops.add_worktree(
                    settings.repo_root, path, branch=branch, ref=None, create_branch=False
                )
            case BranchStatus.NEITHER_EXISTS:
                git_ops.add_worktree(
                    settings.repo_root,
                    path,
                    branch=branch,
                    ref=plan.start_point,
                    create_branch=True,
                )
    except GitError as e:
        raise WorktreeCreateFailed(path, e.stderr) from e


def grow_worktree(
    git_ops: GitOps,
    prompter: Prompter,
    feedback: UserFeedback,
    settings: WorktreeSettings,
    branch: str,
) -> GrowResult:
    """Create a worktree for branch under the configured base directory.

    Args:
        git_ops: Git port
        prompter: Resolves the stale-reference decision point
        feedback: Progress output
        settings: Repository root, worktree base and main branch
        branch: Branch to check out (created if it does not exist)

    Returns:
        GrowResult describing the new worktree

    Raises:
        InvalidBranchName: Branch name failed validation
        WorktreeAlreadyExists: Target directory is already on disk
        BranchCheckedOutElsewhere: Branch is attached to a live worktree
        MissingStartPoint: New branch requested without a main branch
        Cancelled: User declined stale-reference pruning
        WorktreeCreateFailed: `git worktree add` failed
        GitError: Listing or pruning worktrees failed
    """
    ensure_valid_branch_name(branch)

    path = settings.worktree_path_for(branch)
    if git_ops.path_exists(path):
        raise WorktreeAlreadyExists(path)

    feedback.info(f"Branch: {click.style(branch, fg='cyan')}")
    feedback.info(f"Folder: {click.style(str(path), dim=True)}")

    try:
        git_ops.fetch_all(settings.repo_root)
        feedback.info("Fetched latest from remote")
    except GitError as e:
        logger.warning("Fetch failed, continuing with local refs: %s", e.message)
        feedback.warning("Could not fetch from remote (continuing anyway)")

    plan = plan_grow(git_ops, settings, branch)
    _describe_branch(feedback, branch, plan, settings.main_branch)

    conflict = plan.conflicting_worktree
    if conflict is not None and not plan.requires_stale_prune:
        raise BranchCheckedOutElsewhere(branch, conflict.path)

    if plan.branch_status is BranchStatus.NEITHER_EXISTS and plan.start_point is None:
        raise MissingStartPoint(branch)

    if conflict is not None and plan.requires_stale_prune:
        _recover_stale_reference(git_ops, prompter, feedback, settings, branch, conflict)

    _create_worktree(git_ops, settings, branch, path, plan)
    feedback.success("Worktree created")

    return GrowResult(
        branch=branch,
        path=path,
        branch_status=plan.branch_status,
        pruned_stale=plan.requires_stale_prune,
    )


# ============================================================================
# prune
# ============================================================================


class PruneOutcome(Enum):
    REMOVED = "removed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PruneResult:
    name: str
    path: Path
    outcome: PruneOutcome
    forced: bool = False
    error: str | None = None


@dataclass(frozen=True)
class PruneSummary:
    results: tuple[PruneResult, ...]

    def _count(self, outcome: PruneOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)

    @property
    def succeeded(self) -> int:
        return self._count(PruneOutcome.REMOVED)

    @property
    def failed(self) -> int:
        return self._count(PruneOutcome.FAILED)

    @property
    def cancelled(self) -> int:
        return self._count(PruneOutcome.CANCELLED)


@dataclass(frozen=True)
class PruneCandidate:
    path: Path
    name: str
    branch: str | None
    hint: str
    mtime: float | None


_KIND_COLORS: dict[ChangeKind, str] = {
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.ADDED: "green",
    ChangeKind.DELETED: "red",
    ChangeKind.UNTRACKED: "bright_black",
    ChangeKind.RENAMED: "blue",
    ChangeKind.UNMERGED: "magenta",
    ChangeKind.OTHER: "white",
}


def format_status_entry(entry: StatusEntry) -> str:
    label = click.style(entry.label.ljust(10), fg=_KIND_COLORS[entry.kind])
    return f"  {label} {entry.path}"


def _same_path(left: Path, right: Path) -> bool:
    return left == right or left.resolve() == right.resolve()


def read_dirty_status(git_ops: GitOps, worktree_path: Path) -> DirtyStatus:
    return parse_porcelain_status(git_ops.get_status(worktree_path))


def resolve_prune_target(git_ops: GitOps, settings: WorktreeSettings, branch: str) -> Path:
    """Map a branch name to the worktree path it would live at.

    Raises:
        InvalidBranchName: Branch name failed validation
        WorktreeNotFound: No worktree record and no .git marker at the path
    """
    ensure_valid_branch_name(branch)
    path = settings.worktree_path_for(branch)

    worktrees = git_ops.list_worktrees(settings.repo_root)
    if any(_same_path(wt.path, path) for wt in worktrees):
        return path
    if git_ops.path_exists(path / ".git"):
        return path
    raise WorktreeNotFound(path)


def prune_worktree(
    git_ops: GitOps,
    prompter: Prompter,
    feedback: UserFeedback,
    settings: WorktreeSettings,
    path: Path,
) -> PruneResult:
    """Remove one worktree, asking before discarding uncommitted changes.

    A clean worktree is removed without --force and without prompting.

    Raises:
        Cancelled: User declined to force-remove a dirty worktree
        WorktreeRemoveFailed: `git worktree remove` failed
        GitError: Status check failed
    """
    status = read_dirty_status(git_ops, path)
    force = False

    if status.is_clean:
        feedback.info("Worktree is clean")
    else:
        feedback.warning("Uncommitted changes detected:")
        for entry in status.entries:
            feedback.info(format_status_entry(entry))

        if not prompter.confirm(
            f"Force delete worktree with {len(status)} uncommitted change(s)?", default=False
        ):
            raise Cancelled(
                f"Prune of {path} cancelled. Commit or stash your changes first."
            )
        force = True

    try:
        git_ops.remove_worktree(settings.repo_root, path, force=force)
    except GitError as e:
        raise WorktreeRemoveFailed(path, e.stderr) from e

    return PruneResult(name=path.name, path=path, outcome=PruneOutcome.REMOVED, forced=force)


def list_prune_candidates(git_ops: GitOps, settings: WorktreeSettings) -> list[PruneCandidate]:
    """List managed worktrees with a clean/dirty hint, most recent first.

    Only worktrees under the configured base are included. Never mutates.
    """
    candidates: list[PruneCandidate] = []
    for wt in git_ops.list_worktrees(settings.repo_root):
        if wt.is_root or not wt.path.is_relative_to(settings.worktree_base):
            continue

        if not wt.exists_on_disk:
            hint = "stale (directory missing)"
        else:
            try:
                hint = read_dirty_status(git_ops, wt.path).summary_hint()
            except GitError as e:
                logger.debug("Status check failed for %s: %s", wt.path, e.message)
                hint = "status unknown"

        candidates.append(
            PruneCandidate(
                path=wt.path,
                name=wt.path.name,
                branch=wt.branch,
                hint=hint,
                mtime=git_ops.path_mtime(wt.path),
            )
        )

    candidates.sort(key=lambda c: c.mtime if c.mtime is not None else 0.0, reverse=True)
    return candidates


def prune_worktrees_batch(
    git_ops: GitOps,
    prompter: Prompter,
    feedback: UserFeedback,
    settings: WorktreeSettings,
    paths: list[Path],
) -> PruneSummary:
    """Prune several worktrees sequentially with per-target isolation.

    One target's failure or cancellation is recorded and the remaining
    targets still run.
    """
    results: list[PruneResult] = []
    for path in paths:
        name = path.name
        feedback.info("")
        feedback.info(click.style(f"Processing: {name}", bold=True))
        feedback.info(f"Worktree: {click.style(str(path), dim=True)}")

        try:
            result = prune_worktree(git_ops, prompter, feedback, settings, path)
        except Cancelled:
            results.append(PruneResult(name=name, path=path, outcome=PruneOutcome.CANCELLED))
            feedback.warning(f"Skipped {name} (user declined)")
            continue
        except BonsaiError as e:
            results.append(
                PruneResult(name=name, path=path, outcome=PruneOutcome.FAILED, error=e.message)
            )
            feedback.error(f"Failed to remove {name}: {e.message}")
            continue

        results.append(result)
        feedback.success(f"{name} removed{' (forced)' if result.forced else ''}")

    return PruneSummary(results=tuple(results))
