"""Navigator state: legal (screen, mode) views, clocks, and the mutable loop state."""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from git_worktree_navigator.models.repo import RepoRecord
from git_worktree_navigator.models.worktree import WorktreeEntry
from git_worktree_navigator.navigator.hotkeys import ChordBuffer
from git_worktree_navigator.navigator.listing import HotkeyList


class Screen(Enum):
    REPO_LIST = "repos"
    WORKTREE_LIST = "worktrees"


class Mode(Enum):
    NORMAL = "normal"
    FILTER = "filter"
    CONFIRM_DELETE = "confirm-delete"
    HELP = "help"


class View(Enum):
    """Every legal (screen, mode) pair.

    ``CONFIRM_DELETE`` only exists on the worktree screen; asking for it on the
    repository screen raises instead of producing a state.
    """

    REPO_NORMAL = (Screen.REPO_LIST, Mode.NORMAL)
    REPO_FILTER = (Screen.REPO_LIST, Mode.FILTER)
    REPO_HELP = (Screen.REPO_LIST, Mode.HELP)
    WORKTREE_NORMAL = (Screen.WORKTREE_LIST, Mode.NORMAL)
    WORKTREE_FILTER = (Screen.WORKTREE_LIST, Mode.FILTER)
    WORKTREE_CONFIRM_DELETE = (Screen.WORKTREE_LIST, Mode.CONFIRM_DELETE)
    WORKTREE_HELP = (Screen.WORKTREE_LIST, Mode.HELP)

    @property
    def screen(self) -> Screen:
        return self.value[0]

    @property
    def mode(self) -> Mode:
        return self.value[1]

    @classmethod
    def of(cls, screen: Screen, mode: Mode) -> "View":
        try:
            return cls((screen, mode))
        except ValueError:
            raise ValueError(f"{mode.value} mode is not available on the {screen.value} screen") from None

    def with_mode(self, mode: Mode) -> "View":
        return View.of(self.screen, mode)


class Clock:
    """Source of monotonic time in seconds."""

    def now(self) -> float:
        raise NotImplementedError


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic()


@dataclass
class Selection:
    """What the navigator returns when the user picks a worktree."""

    repo_anchor: Path
    worktree_path: Path


@dataclass
class NavigatorState:
    """State owned by the navigator loop; nothing else mutates it."""

    repos: HotkeyList[RepoRecord]
    worktrees: HotkeyList[WorktreeEntry]
    chord: ChordBuffer
    view: View = View.REPO_NORMAL
    status: str = ""
    status_before_help: Optional[str] = None

    # Double tap of "g" jumps to the top
    pending_top: bool = False
    pending_top_at: float = 0.0

    pending_delete: Optional[Path] = None
    active_repo: Optional[RepoRecord] = None
    needs_full_redraw: bool = field(default=True)

    @property
    def screen(self) -> Screen:
        return self.view.screen

    @property
    def mode(self) -> Mode:
        return self.view.mode

    def set_mode(self, mode: Mode) -> None:
        self.view = self.view.with_mode(mode)

    def current_list(self) -> HotkeyList:
        if self.screen is Screen.REPO_LIST:
            return self.repos
        return self.worktrees

    def reset_chords(self) -> None:
        self.chord.clear()
        self.pending_top = False

    def expire(self, now: float, double_tap_window: float) -> None:
        """Drop chord input that has been idle too long."""
        self.chord.expire(now)
        if self.pending_top and now - self.pending_top_at > double_tap_window:
            self.pending_top = False
