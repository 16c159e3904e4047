"""Custom exceptions for git-worktree-navigator"""

from typing import Optional, Sequence


class NavigatorError(Exception):
    """Base exception for all git-worktree-navigator errors."""
    pass


class ConfigIOError(NavigatorError):
    """Exception raised when the registry or persisted state cannot be read or written."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Could not access config at '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ExternalToolError(NavigatorError):
    """Exception raised when a git command exits non-zero or returns malformed output."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"git {operation} failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NoSelectionError(NavigatorError):
    """Exception raised when an action needs a selected item but the visible list is empty."""

    def __init__(self, what: str = "item"):
        self.what = what
        super().__init__(f"no {what} selected")


class AmbiguousRemoteError(NavigatorError):
    """Exception raised when several remotes qualify and none was chosen."""

    def __init__(self, branch: str, remotes: Sequence[str]):
        self.branch = branch
        self.remotes = list(remotes)
        super().__init__(
            f"'{branch}' is available from several remotes ({', '.join(self.remotes)}); choose one"
        )


class NoInteractiveSurfaceError(NavigatorError):
    """Exception raised when no terminal is available for the interactive picker."""

    def __init__(self):
        super().__init__("no TTY available for interactive picker")


class HookError(NavigatorError):
    """Exception raised when a post-creation hook exits non-zero."""

    def __init__(self, command: str, status: int):
        self.command = command
        self.status = status
        super().__init__(f"hook failed (exit {status}): {command}")
