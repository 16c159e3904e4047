"""Worktree data models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from git_worktree_navigator.constants import DETACHED_LABEL


@dataclass(frozen=True)
class WorktreeEntry:
    """One line of ``git worktree list``: a path and its branch (None when detached)."""

    path: str
    branch: Optional[str] = None

    @property
    def branch_label(self) -> str:
        return self.branch if self.branch is not None else DETACHED_LABEL

    def search_text(self) -> str:
        return f"{self.path} {self.branch or ''}"

    def __str__(self) -> str:
        return f"{self.path}\t{self.branch_label}"


@dataclass
class WorktreeListing:
    """Entries for a repository plus the anchor path that produced them."""

    entries: List[WorktreeEntry] = field(default_factory=list)
    anchor: Optional[Path] = None
    repaired: bool = False  # True when the stored anchor was replaced
