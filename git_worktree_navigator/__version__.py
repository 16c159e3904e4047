"""Version information for git-worktree-navigator."""

__version__ = "0.3.0"
