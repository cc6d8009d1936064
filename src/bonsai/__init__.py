"""Git worktree workflow CLI."""
