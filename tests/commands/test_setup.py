"""Tests for bonsai setup."""

from click.testing import CliRunner

from bonsai.cli.cli import cli
from tests.fakes.context import WORKTREE_BASE, create_test_context, make_config
from tests.fakes.gitops import FakeGitOps
from tests.fakes.shell_ops import FakeShellOps

WORKTREE = WORKTREE_BASE / "topic"
CWD = WORKTREE / "nested" / "dir"


def test_setup_runs_commands_at_worktree_root() -> None:
    runner = CliRunner()
    shell_ops = FakeShellOps()
    test_ctx = create_test_context(
        git_ops=FakeGitOps(toplevels={CWD: WORKTREE}),
        shell_ops=shell_ops,
        cwd=CWD,
        config=make_config(setup_commands=["uv sync", "make"]),
    )

    result = runner.invoke(cli, ["setup"], obj=test_ctx)

    assert result.exit_code == 0, result.output
    assert shell_ops.commands_run == [("uv sync", WORKTREE), ("make", WORKTREE)]
    assert "Setup completed successfully!" in result.output
    assert "[1/2] uv sync" in result.output


def test_setup_failure_exits_one() -> None:
    runner = CliRunner()
    shell_ops = FakeShellOps(exit_codes={"uv sync": 3})
    test_ctx = create_test_context(
        git_ops=FakeGitOps(toplevels={CWD: WORKTREE}),
        shell_ops=shell_ops,
        cwd=CWD,
        config=make_config(setup_commands=["uv sync", "make", "test"]),
    )

    result = runner.invoke(cli, ["setup"], obj=test_ctx)

    assert result.exit_code == 1
    assert "Command failed with exit code 3" in result.output
    assert "Stopping setup. 2 command(s) remaining." in result.output
    assert len(shell_ops.commands_run) == 1


def test_setup_without_commands_warns() -> None:
    runner = CliRunner()
    shell_ops = FakeShellOps()
    test_ctx = create_test_context(shell_ops=shell_ops)

    result = runner.invoke(cli, ["setup"], obj=test_ctx)

    assert result.exit_code == 0, result.output
    assert "No setup commands configured." in result.output
    assert shell_ops.commands_run == []
