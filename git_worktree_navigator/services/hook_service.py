"""Post-creation hooks."""
import os
import subprocess
from pathlib import Path
from typing import Sequence

from git_worktree_navigator.exceptions import HookError
from git_worktree_navigator.logging_config import get_logger

logger = get_logger(__name__)

STDERR_FD = 2


class HookService:
    """Runs shell hooks inside a freshly created worktree."""

    def __init__(self, shell: str = "sh"):
        self.shell = shell

    def run_hooks(self, hooks: Sequence[str], worktree_path: Path, branch: str, repo_root: Path) -> None:
        """Run each hook with ``sh -lc`` in ``worktree_path``.

        The hook environment carries GW_WORKTREE_PATH, GW_BRANCH and
        GW_REPO_ROOT. The first failing hook stops the sequence.

        Raises:
            HookError: a hook exited non-zero
        """
        if not hooks:
            return

        env = dict(os.environ)
        env.update({
            "GW_WORKTREE_PATH": str(worktree_path),
            "GW_BRANCH": branch,
            "GW_REPO_ROOT": str(repo_root),
        })

        # stdout may be captured by the shell wrapper (`cd "$(gw go)"`), so hook output goes to stderr
        for command in hooks:
            logger.info(f"Running hook in {worktree_path}: {command}")
            result = subprocess.run(
                [self.shell, "-lc", command], cwd=str(worktree_path), env=env, stdout=STDERR_FD
            )
            if result.returncode != 0:
                logger.error(f"Hook failed with exit {result.returncode}: {command}")
                raise HookError(command, result.returncode)
