"""Tests for multi-select input parsing."""

import pytest

from bonsai.core.prompts import parse_selection


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", []),
        ("  ", []),
        ("1", [0]),
        ("1,3", [0, 2]),
        ("3 1", [2, 0]),
        ("2-4", [1, 2, 3]),
        ("1, 2-3, 2", [0, 1, 2]),
        ("all", [0, 1, 2, 3]),
        ("ALL", [0, 1, 2, 3]),
    ],
)
def test_valid_selections(raw: str, expected: list[int]) -> None:
    assert parse_selection(raw, 4) == expected


@pytest.mark.parametrize("raw", ["0", "5", "x", "1,x", "3-2", "2-9", "-1", "1-"])
def test_invalid_selections(raw: str) -> None:
    assert parse_selection(raw, 4) is None
