"""Git operations, built on GitPython."""

from .queries import GitQueries
from .repository import detect_repo, detect_repo_from_cwd
from .spec_resolver import SpecResolver, parse_pull_request_url, sanitize_branch_for_path
from .worktrees import WorktreeService, parse_worktree_porcelain

__all__ = [
    "GitQueries",
    "detect_repo",
    "detect_repo_from_cwd",
    "SpecResolver",
    "parse_pull_request_url",
    "sanitize_branch_for_path",
    "WorktreeService",
    "parse_worktree_porcelain",
]
