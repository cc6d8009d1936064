"""Error taxonomy for worktree lifecycle operations.

All errors derive from BonsaiError and carry a user-facing message that names
the branch or path involved. The CLI layer turns them into a styled
"Error:" line and exit code 1.

Categories:
- Validation: InvalidBranchName (no I/O performed)
- Precondition: WorktreeAlreadyExists, WorktreeNotFound, MissingStartPoint
- Conflict: BranchCheckedOutElsewhere (never auto-resolved)
- Transport: GitError (wraps a non-zero git exit)
- Mutation failures: WorktreeCreateFailed, WorktreeRemoveFailed
- Cancellation: Cancelled (user declined a confirmation)
- Config: ConfigNotFound, ConfigError
"""

from pathlib import Path


class BonsaiError(Exception):
    """Base class for all errors surfaced to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GitError(BonsaiError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, message: str, exit_code: int, stderr: str) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class InvalidBranchName(BonsaiError):
    def __init__(self, branch: str, reason: str) -> None:
        super().__init__(f"Invalid branch name '{branch}': {reason}")
        self.branch = branch
        self.reason = reason


class WorktreeAlreadyExists(BonsaiError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Worktree folder already exists: {path}\n"
            "Use a different branch name or remove the existing worktree."
        )
        self.path = path


class WorktreeNotFound(BonsaiError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Worktree not found: {path}\nMake sure the branch name is correct."
        )
        self.path = path


class MissingStartPoint(BonsaiError):
    def __init__(self, branch: str) -> None:
        super().__init__(
            f"Cannot create new branch '{branch}': main branch start point not configured.\n"
            "Run 'bonsai init' and set the main branch."
        )
        self.branch = branch


class BranchCheckedOutElsewhere(BonsaiError):
    """The branch is attached to another worktree that still exists on disk."""

    def __init__(self, branch: str, path: Path) -> None:
        super().__init__(
            f"Branch '{branch}' is already checked out at:\n"
            f"  {path}\n\n"
            "Either use that worktree or check out a different branch there first."
        )
        self.branch = branch
        self.path = path


class WorktreeCreateFailed(BonsaiError):
    def __init__(self, path: Path, stderr: str) -> None:
        super().__init__(
            f"Failed to create worktree at {path}: {stderr or 'unknown error'}"
        )
        self.path = path
        self.stderr = stderr


class WorktreeRemoveFailed(BonsaiError):
    def __init__(self, path: Path, stderr: str) -> None:
        super().__init__(
            f"Failed to remove worktree at {path}: {stderr or 'unknown error'}"
        )
        self.path = path
        self.stderr = stderr


class Cancelled(BonsaiError):
    """The user declined a confirmation. No mutation has been performed."""


class ConfigNotFound(BonsaiError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"No bonsai config found at {path}. Run 'bonsai init' first.")
        self.path = path


class ConfigError(BonsaiError):
    """The config file exists but is malformed or missing required fields."""
