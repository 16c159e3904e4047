"""Worktree listing, anchor repair and removal."""

import os
from pathlib import Path
from typing import List, Optional

import git

from git_worktree_navigator.exceptions import ConfigIOError, ExternalToolError
from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.models.repo import RepoRecord
from git_worktree_navigator.models.worktree import WorktreeEntry, WorktreeListing
from git_worktree_navigator.services.git.repository import to_tool_error
from git_worktree_navigator.services.registry_service import RegistryService

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[WorktreeEntry]:
    """Parse ``git worktree list --porcelain``.

    Format::

        worktree /path/to/worktree
        HEAD <sha>
        branch refs/heads/<name>      (or "detached")
        <blank line between worktrees>
    """
    entries = []
    path: Optional[str] = None
    branch: Optional[str] = None

    for line in output.splitlines():
        line = line.rstrip()
        if not line:
            if path is not None:
                entries.append(WorktreeEntry(path=path, branch=branch))
            path, branch = None, None
            continue
        if line.startswith("worktree "):
            path = line[len("worktree "):]
        elif line.startswith("branch "):
            ref = line[len("branch "):]
            branch = ref[len("refs/heads/"):] if ref.startswith("refs/heads/") else ref

    # Last entry may lack a trailing blank line
    if path is not None:
        entries.append(WorktreeEntry(path=path, branch=branch))
    return entries


class WorktreeService:
    """Lists and removes worktrees for registry records."""

    def __init__(self, registry: RegistryService):
        """Initialize the worktree service.

        Args:
            registry: Registry used to persist repaired anchors
        """
        self.registry = registry

    def _list_at(self, anchor: Path, git_common_dir: Path) -> Optional[List[WorktreeEntry]]:
        """List from ``anchor``; None when it belongs to some other repository."""
        cmd = git.Git(str(anchor))
        common = Path(cmd.rev_parse("--git-common-dir").strip())
        if not common.is_absolute():
            common = anchor / common
        if not _same_path(common, git_common_dir):
            return None
        return parse_worktree_porcelain(cmd.worktree("list", "--porcelain"))

    def _list_via_common_dir(self, git_common_dir: Path) -> List[WorktreeEntry]:
        output = git.Git().execute(
            ["git", "--git-dir", str(git_common_dir), "worktree", "list", "--porcelain"]
        )
        return parse_worktree_porcelain(output)

    def list_worktrees(self, record: RepoRecord) -> WorktreeListing:
        """List worktrees for ``record``, repairing its anchor when it went stale.

        The stored anchor is tried first. When it is gone or git refuses it, the
        shared git directory is used instead; it survives deletion of any single
        worktree. After a successful fallback the anchor becomes the first entry
        and is persisted right away.

        Raises:
            ExternalToolError: both the anchor and the shared git directory failed
        """
        anchor = Path(record.anchor_path)
        if anchor.is_dir():
            try:
                entries = self._list_at(anchor, record.git_common_dir)
                if entries is not None:
                    logger.debug(f"Found {len(entries)} worktrees via anchor {anchor}")
                    return WorktreeListing(entries=entries, anchor=anchor)
                logger.info(f"Anchor {anchor} belongs to another repository; falling back")
            except git.exc.GitCommandError as e:
                logger.info(f"Anchor {anchor} is not usable ({e}); falling back to {record.git_common_dir}")
        else:
            logger.info(f"Anchor {anchor} no longer exists; falling back to {record.git_common_dir}")

        try:
            entries = self._list_via_common_dir(record.git_common_dir)
        except git.exc.GitCommandError as e:
            raise to_tool_error(f"worktree list (git dir {record.git_common_dir})", e)

        if not entries:
            return WorktreeListing(entries=entries, anchor=anchor)

        repaired = Path(entries[0].path)
        record.anchor_path = repaired
        try:
            self.registry.persist_anchor(record.repo_id, repaired)
        except ConfigIOError as e:
            logger.warning(f"Could not persist repaired anchor for {record.repo_name}: {e}")
        logger.info(f"Repaired anchor for {record.repo_name}: {anchor} -> {repaired}")
        return WorktreeListing(entries=entries, anchor=repaired, repaired=True)

    def remove_worktree(self, repo_anchor: Path, target_path: Path, force: bool = False) -> None:
        """Remove the worktree at ``target_path``; its branch is kept.

        Raises:
            ExternalToolError: git failed, or ``target_path`` is the main worktree
        """
        try:
            repo = git.Repo(str(repo_anchor), search_parent_directories=True)
            entries = parse_worktree_porcelain(repo.git.worktree("list", "--porcelain"))
        except git.exc.GitCommandError as e:
            raise to_tool_error("worktree list", e)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise ExternalToolError("worktree remove", f"not a repository: {e}")

        if entries and _same_path(entries[0].path, target_path):
            raise ExternalToolError("worktree remove", f"refusing to remove the main worktree {target_path}")

        args = ["remove", str(target_path)]
        if force:
            args.append("--force")
        try:
            repo.git.worktree(*args)
        except git.exc.GitCommandError as e:
            logger.error(f"Failed to remove worktree at {target_path}: {e}")
            raise to_tool_error("worktree remove", e)
        logger.info(f"Removed worktree at {target_path}")


def _same_path(a, b) -> bool:
    return os.path.realpath(str(a)) == os.path.realpath(str(b))
