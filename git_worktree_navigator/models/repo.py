"""Repository data models."""

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


def repo_id_for(git_common_dir: Path) -> str:
    """Stable repository id derived from the canonical shared git directory."""
    return hashlib.sha256(str(git_common_dir).encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class RepoContext:
    """A repository detected from a path on disk."""

    toplevel: Path
    git_common_dir: Path
    repo_name: str

    @property
    def repo_id(self) -> str:
        return repo_id_for(self.git_common_dir)


@dataclass
class RepoRecord:
    """A repository known to the registry.

    ``repo_id`` never changes for the life of the record. ``anchor_path`` is a
    fast-path hint that may point at a deleted worktree and is repaired lazily.
    """

    repo_id: str
    repo_name: str
    git_common_dir: Path
    anchor_path: Path
    worktrees_dir: Optional[Path] = None
    hooks: List[str] = field(default_factory=list)

    @classmethod
    def from_context(cls, context: RepoContext) -> "RepoRecord":
        return cls(
            repo_id=context.repo_id,
            repo_name=context.repo_name,
            git_common_dir=context.git_common_dir,
            anchor_path=context.toplevel,
        )

    def search_text(self) -> str:
        return f"{self.repo_name} {self.anchor_path}"

    def to_dict(self) -> dict:
        return {
            "repo_name": self.repo_name,
            "git_common_dir": str(self.git_common_dir),
            "anchor_path": str(self.anchor_path),
            "worktrees_dir": str(self.worktrees_dir) if self.worktrees_dir else None,
            "hooks": [{"command": command} for command in self.hooks],
        }

    @classmethod
    def from_dict(cls, repo_id: str, data: dict) -> "RepoRecord":
        """Build a record from its persisted form; raises KeyError/TypeError when malformed."""
        worktrees_dir = data.get("worktrees_dir")
        hooks = [hook["command"] for hook in data.get("hooks", [])]
        return cls(
            repo_id=repo_id,
            repo_name=data["repo_name"],
            git_common_dir=Path(data["git_common_dir"]),
            anchor_path=Path(data["anchor_path"]),
            worktrees_dir=Path(worktrees_dir) if worktrees_dir else None,
            hooks=hooks,
        )
