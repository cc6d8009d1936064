"""Tests for porcelain status parsing."""

from bonsai.core.worktree_status import ChangeKind, StatusEntry, parse_porcelain_status


def test_empty_output_is_clean() -> None:
    status = parse_porcelain_status("")

    assert status.is_clean
    assert len(status) == 0
    assert status.summary_hint() == "clean"


def test_leading_space_in_code_is_preserved() -> None:
    """' M file' is a worktree modification; the path must not lose a char."""
    status = parse_porcelain_status(" M src/app.py\n")

    assert status.entries == (StatusEntry(code=" M", path="src/app.py"),)
    assert status.entries[0].kind is ChangeKind.MODIFIED


def test_classifies_each_kind() -> None:
    output = "\n".join(
        [
            "M  staged.py",
            "A  new.py",
            " D gone.py",
            "?? scratch.txt",
            "R  old.py -> renamed.py",
            "UU conflict.py",
            "T  typechange.py",
        ]
    )

    kinds = [entry.kind for entry in parse_porcelain_status(output).entries]

    assert kinds == [
        ChangeKind.MODIFIED,
        ChangeKind.ADDED,
        ChangeKind.DELETED,
        ChangeKind.UNTRACKED,
        ChangeKind.RENAMED,
        ChangeKind.UNMERGED,
        ChangeKind.OTHER,
    ]


def test_worktree_character_wins_over_index() -> None:
    entry = StatusEntry(code="AM", path="both.py")

    assert entry.kind is ChangeKind.MODIFIED


def test_unknown_code_label_falls_back_to_code() -> None:
    assert StatusEntry(code="T ", path="x").label == "T"
    assert StatusEntry(code="M ", path="x").label == "modified"


def test_blank_lines_are_skipped_and_counted_hint() -> None:
    status = parse_porcelain_status(" M a.py\n\n?? b.py\n")

    assert len(status) == 2
    assert status.summary_hint() == "dirty (2 files)"
    assert parse_porcelain_status("?? one.py").summary_hint() == "dirty (1 file)"
