"""Parsing and classification of `git status --porcelain` output."""

from dataclasses import dataclass
from enum import Enum


class ChangeKind(Enum):
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    UNTRACKED = "untracked"
    RENAMED = "renamed"
    UNMERGED = "unmerged"
    OTHER = "changed"


_KIND_BY_CODE: dict[str, ChangeKind] = {
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "?": ChangeKind.UNTRACKED,
    "R": ChangeKind.RENAMED,
    "U": ChangeKind.UNMERGED,
}


@dataclass(frozen=True)
class StatusEntry:
    """One porcelain status line: two-character XY code and a path."""

    code: str
    path: str

    @property
    def kind(self) -> ChangeKind:
        """Classify the change.

        The worktree-status character (Y) wins when non-blank because it
        reflects uncommitted work; otherwise the index-status character (X).
        """
        index_status = self.code[0] if self.code else " "
        worktree_status = self.code[1] if len(self.code) > 1 else " "
        effective = worktree_status if worktree_status != " " else index_status
        return _KIND_BY_CODE.get(effective, ChangeKind.OTHER)

    @property
    def label(self) -> str:
        kind = self.kind
        if kind is ChangeKind.OTHER:
            return self.code.strip() or kind.value
        return kind.value


@dataclass(frozen=True)
class DirtyStatus:
    """Uncommitted changes of a worktree. Empty means clean."""

    entries: tuple[StatusEntry, ...]

    @property
    def is_clean(self) -> bool:
        return len(self.entries) == 0

    def __len__(self) -> int:
        return len(self.entries)

    def summary_hint(self) -> str:
        """Short description used in selection lists."""
        if self.is_clean:
            return "clean"
        count = len(self.entries)
        return f"dirty ({count} file{'s' if count != 1 else ''})"


def parse_porcelain_status(output: str) -> DirtyStatus:
    """Parse porcelain v1 output into a DirtyStatus.

    Format per line: "XY path" where XY is the two-character status code
    and the path starts at column 3.

    Args:
        output: Raw stdout of `git status --porcelain`

    Returns:
        DirtyStatus with one entry per non-empty line
    """
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        entries.append(StatusEntry(code=line[:2], path=line[3:]))
    return DirtyStatus(entries=tuple(entries))
