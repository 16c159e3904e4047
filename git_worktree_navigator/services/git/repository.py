"""Repository detection and git error translation."""

import os
from pathlib import Path
from typing import Union

import git

from git_worktree_navigator.exceptions import ExternalToolError
from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.models.repo import RepoContext

logger = get_logger(__name__)


def to_tool_error(operation: str, error: git.exc.GitCommandError) -> ExternalToolError:
    """Turn a GitCommandError into an ExternalToolError with the useful stderr."""
    stderr = (error.stderr if getattr(error, "stderr", None) else "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'").strip()
    status = getattr(error, "status", "unknown")

    if stderr:
        message = f"(exit {status}) {stderr}"
    else:
        message = f"exit code {status}"
    return ExternalToolError(operation, message)


def detect_repo(path: Union[str, Path]) -> RepoContext:
    """Detect the repository containing ``path``.

    Raises:
        ExternalToolError: ``path`` is not inside a git working tree
    """
    path = Path(path)
    if not path.is_dir():
        raise ExternalToolError("rev-parse", f"not a directory: {path}")

    try:
        toplevel = Path(git.Git(str(path)).rev_parse("--show-toplevel").strip())
        common = git.Git(str(toplevel)).rev_parse("--git-common-dir").strip()
    except git.exc.GitCommandError as e:
        raise to_tool_error("rev-parse", e)

    git_common_dir = Path(common)
    if not git_common_dir.is_absolute():
        # Relative results are relative to the directory git ran in
        git_common_dir = toplevel / git_common_dir
    git_common_dir = Path(os.path.realpath(git_common_dir))

    repo_name = toplevel.name or "repo"
    context = RepoContext(toplevel=toplevel, git_common_dir=git_common_dir, repo_name=repo_name)
    logger.debug(f"Detected {repo_name} at {toplevel} (common dir {git_common_dir})")
    return context


def detect_repo_from_cwd() -> RepoContext:
    return detect_repo(Path.cwd())
