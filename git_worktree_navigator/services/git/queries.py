"""Read-only git queries used while resolving a branch or pull request argument."""

from pathlib import Path
from typing import List, Optional

import git

from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.services.git.repository import to_tool_error

logger = get_logger(__name__)


class GitQueries:
    """Existence checks and remote enumeration. Nothing here mutates the repository."""

    def __init__(self, repo_path: Path, query_remotes: bool = True):
        """Initialize the query helper.

        Args:
            repo_path: Any working directory of the repository
            query_remotes: Ask remotes with ls-remote when no remote-tracking ref matches
        """
        self.repo_path = Path(repo_path)
        self.query_remotes = query_remotes

    def _git(self) -> git.Git:
        return git.Git(str(self.repo_path))

    def _ref_exists(self, ref: str) -> bool:
        try:
            self._git().show_ref("--verify", "--quiet", ref)
            return True
        except git.exc.GitCommandError:
            return False

    def local_branch_exists(self, branch: str) -> bool:
        return self._ref_exists(f"refs/heads/{branch}")

    def list_remotes(self) -> List[str]:
        try:
            output = self._git().remote()
        except git.exc.GitCommandError as e:
            raise to_tool_error("remote", e)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def remote_url(self, remote: str) -> Optional[str]:
        try:
            return self._git().remote("get-url", remote).strip() or None
        except git.exc.GitCommandError:
            return None

    def has_remote_tracking_branch(self, remote: str, branch: str) -> bool:
        return self._ref_exists(f"refs/remotes/{remote}/{branch}")

    def remote_has_branch(self, remote: str, branch: str) -> bool:
        """Ask the remote itself; unreachable remotes count as not having it."""
        try:
            output = self._git().ls_remote("--heads", remote, f"refs/heads/{branch}")
        except git.exc.GitCommandError as e:
            logger.warning(f"Could not query remote {remote} for {branch}: {to_tool_error('ls-remote', e)}")
            return False
        return bool(output.strip())

    def remotes_with_branch(self, branch: str) -> List[str]:
        """Remotes carrying ``branch``, in ``git remote`` order.

        Remote-tracking refs are consulted first; the network is only touched
        when none of them match and remote queries are enabled.
        """
        remotes = self.list_remotes()
        found = [r for r in remotes if self.has_remote_tracking_branch(r, branch)]
        if found or not self.query_remotes:
            return found
        return [r for r in remotes if self.remote_has_branch(r, branch)]
