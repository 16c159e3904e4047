"""Worktree creation plan models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from git_worktree_navigator.models.repo import RepoContext


class SourceKind(Enum):
    """Where the branch for a new worktree comes from."""
    EXISTING_LOCAL = "existing-local"
    EXISTING_REMOTE = "existing-remote"
    NEW = "new"
    PULL_REQUEST = "pull-request"


@dataclass(frozen=True)
class BranchSource:
    """Classification of a resolved branch, with the data each kind carries."""

    kind: SourceKind
    remote: Optional[str] = None
    pr_number: Optional[int] = None

    @classmethod
    def existing_local(cls) -> "BranchSource":
        return cls(SourceKind.EXISTING_LOCAL)

    @classmethod
    def existing_remote(cls, remote: str) -> "BranchSource":
        return cls(SourceKind.EXISTING_REMOTE, remote=remote)

    @classmethod
    def new(cls) -> "BranchSource":
        return cls(SourceKind.NEW)

    @classmethod
    def pull_request(cls, number: int, remote: str) -> "BranchSource":
        return cls(SourceKind.PULL_REQUEST, remote=remote, pr_number=number)

    def __str__(self) -> str:
        if self.kind is SourceKind.EXISTING_REMOTE:
            return f"{self.kind.value}({self.remote})"
        if self.kind is SourceKind.PULL_REQUEST:
            return f"{self.kind.value}(#{self.pr_number} via {self.remote})"
        return self.kind.value


@dataclass(frozen=True)
class CreationPlan:
    """Everything needed to create one worktree."""

    repo: RepoContext
    branch: str
    source: BranchSource
    destination: Path
    base: Optional[str] = None  # Only meaningful for NEW branches

    @property
    def requires_tracking(self) -> bool:
        """True when the branch must be fetched from a remote first."""
        return self.source.kind in (SourceKind.EXISTING_REMOTE, SourceKind.PULL_REQUEST)
