"""Branch name validation and folder-name sanitization.

Pure functions with no I/O. Validation must run before a branch name is
passed to any git invocation.
"""

import re
from dataclasses import dataclass

from bonsai.core.errors import InvalidBranchName

_ALLOWED_CHARS = re.compile(r"[A-Za-z0-9._/-]+")


@dataclass(frozen=True)
class BranchNameValidation:
    """Outcome of validating a branch name.

    error is None exactly when valid is True.
    """

    valid: bool
    error: str | None = None


def validate_branch_name(branch: str) -> BranchNameValidation:
    """Validate a branch name for safe use as a git argument.

    Rules are checked in order and the first failure is reported:

    1. Not empty or whitespace-only
    2. Does not start with '-' (would be parsed as a git flag)
    3. Only letters, digits, '.', '_', '/', '-'
    4. No '..'
    5. Does not end with '.lock'

    Args:
        branch: Candidate branch name

    Returns:
        BranchNameValidation with valid=True, or valid=False and a reason

    Examples:
        >>> validate_branch_name("feature/auth").valid
        True
        >>> validate_branch_name("-foo").valid
        False
    """
    if not branch or branch.strip() == "":
        return BranchNameValidation(valid=False, error="Branch name cannot be empty")

    if branch.startswith("-"):
        return BranchNameValidation(
            valid=False,
            error="Branch name cannot start with '-' (would be interpreted as a git flag)",
        )

    if _ALLOWED_CHARS.fullmatch(branch) is None:
        return BranchNameValidation(
            valid=False,
            error="Branch name contains invalid characters (allowed: letters, numbers, . _ / -)",
        )

    if ".." in branch:
        return BranchNameValidation(valid=False, error="Branch name cannot contain '..'")

    if branch.endswith(".lock"):
        return BranchNameValidation(valid=False, error="Branch name cannot end with '.lock'")

    return BranchNameValidation(valid=True)


def ensure_valid_branch_name(branch: str) -> str:
    """Return branch unchanged, or raise InvalidBranchName."""
    result = validate_branch_name(branch)
    if not result.valid:
        raise InvalidBranchName(branch, result.error or "invalid")
    return branch


def sanitize_branch_name(branch: str) -> str:
    """Convert a branch name into a worktree folder name.

    Slashes become hyphens: "feature/auth" -> "feature-auth".
    """
    return branch.replace("/", "-")
