"""Raw-mode terminal surface for the navigator."""

import contextlib
import os
import sys
import termios
import tty
from typing import Optional, TextIO

from git_worktree_navigator.exceptions import NoInteractiveSurfaceError
from git_worktree_navigator.logging_config import get_logger

logger = get_logger(__name__)

# Alternate screen + hidden cursor, and the reverse
ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l"
LEAVE_SEQUENCE = b"\x1b[?25h\x1b[?1049l"


class TerminalSurface:
    """Owns raw mode and the alternate screen.

    Modes are only ever toggled by ``session()`` and ``suspended()``, whose
    ``finally`` blocks put the terminal back however the body exits.
    """

    def __init__(self, input_fd: int, output_fd: int, owns_input: bool = False):
        self.input_fd = input_fd
        self.output_fd = output_fd
        self.owns_input = owns_input
        self._saved_tty_state = termios.tcgetattr(input_fd)
        self.active = False

    def enable(self) -> None:
        tty.setraw(self.input_fd, termios.TCSAFLUSH)
        os.write(self.output_fd, ENTER_SEQUENCE)
        self.active = True

    def disable(self) -> None:
        os.write(self.output_fd, LEAVE_SEQUENCE)
        termios.tcsetattr(self.input_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self.active = False

    @contextlib.contextmanager
    def session(self):
        """Raw mode on the alternate screen for the life of the block."""
        try:
            self.enable()
            yield self
        finally:
            self.disable()

    @contextlib.contextmanager
    def suspended(self):
        """Cooked mode on the main screen, e.g. for line prompts; resumes afterwards."""
        was_active = self.active
        if was_active:
            self.disable()
        try:
            yield self
        finally:
            if was_active:
                self.enable()

    def prompt_stream(self) -> Optional[TextIO]:
        """Text stream for line prompts when keys do not come from stdin, else None.

        The caller closes it.
        """
        if not self.owns_input:
            return None
        return os.fdopen(os.dup(self.input_fd), "r", encoding="utf-8", errors="replace")

    def close(self) -> None:
        if self.owns_input:
            os.close(self.input_fd)


def open_surface() -> TerminalSurface:
    """Open the terminal the navigator will draw on.

    Drawing goes to stdout when it is a terminal, else to stderr, so that
    ``$(gw go)`` can capture the selected path. Keys come from stdin, or from
    /dev/tty when stdin is redirected.

    Raises:
        NoInteractiveSurfaceError: no terminal is available
    """
    output_fd: Optional[int] = None
    for stream in (sys.stdout, sys.stderr):
        if stream.isatty():
            output_fd = stream.fileno()
            break
    if output_fd is None:
        raise NoInteractiveSurfaceError()

    if sys.stdin.isatty():
        return TerminalSurface(sys.stdin.fileno(), output_fd)
    try:
        input_fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as e:
        logger.debug(f"Cannot open /dev/tty: {e}")
        raise NoInteractiveSurfaceError()
    return TerminalSurface(input_fd, output_fd, owns_input=True)
