"""Interactive repository and worktree navigator."""

from .core import Navigator
from .events import KeyEvent
from .frame import Frame, FrameRow
from .hotkeys import ChordBuffer, assign_hotkeys
from .listing import HotkeyList, project
from .state import Clock, Mode, MonotonicClock, NavigatorState, Screen, Selection, View

__all__ = [
    "Navigator",
    "KeyEvent",
    "Frame",
    "FrameRow",
    "ChordBuffer",
    "assign_hotkeys",
    "HotkeyList",
    "project",
    "Clock",
    "Mode",
    "MonotonicClock",
    "NavigatorState",
    "Screen",
    "Selection",
    "View",
]
