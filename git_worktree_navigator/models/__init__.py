"""Data models for git-worktree-navigator."""

from .repo import RepoContext, RepoRecord
from .worktree import WorktreeEntry, WorktreeListing
from .plan import BranchSource, CreationPlan, SourceKind

__all__ = [
    "RepoContext",
    "RepoRecord",
    "WorktreeEntry",
    "WorktreeListing",
    "BranchSource",
    "CreationPlan",
    "SourceKind",
]
