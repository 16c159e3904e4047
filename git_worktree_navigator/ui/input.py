"""Raw key decoding."""

import os
import select
from typing import List, Optional

from git_worktree_navigator.navigator.events import (
    BACKSPACE,
    DOWN,
    ENTER,
    ESC,
    LEFT,
    RIGHT,
    TAB,
    UP,
    KeyEvent,
)

ESC_SEQUENCE_TIMEOUT = 0.025

_ARROWS = {b"A": UP, b"B": DOWN, b"C": RIGHT, b"D": LEFT}


class KeyReader:
    """Reads keys from a raw-mode terminal file descriptor."""

    def __init__(self, fd: int):
        self.fd = fd
        self._pending: List[bytes] = []

    def poll(self, timeout: float) -> bool:
        """True when a key can be read without blocking."""
        if self._pending:
            return True
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout))
        return bool(ready)

    def _read_byte(self) -> bytes:
        if self._pending:
            return self._pending.pop(0)
        return os.read(self.fd, 1)

    def _read_ready_byte(self) -> Optional[bytes]:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([self.fd], [], [], ESC_SEQUENCE_TIMEOUT)
        if not ready:
            return None
        return os.read(self.fd, 1) or None

    def read_key(self) -> Optional[KeyEvent]:
        """Read one key; None on end of input or an unrecognized sequence."""
        ch = self._read_byte()
        if not ch:
            return None

        if ch in (b"\r", b"\n"):
            return KeyEvent(ENTER)
        if ch == b"\t":
            return KeyEvent(TAB)
        if ch in (b"\x08", b"\x7f"):
            return KeyEvent(BACKSPACE)
        if ch == b"\x1b":
            return self._read_escape()
        if ord(ch) < 0x20:
            # ctrl+a .. ctrl+z arrive as 0x01 .. 0x1a
            return KeyEvent.with_ctrl(chr(ord(ch) + 0x60))
        return KeyEvent.char(self._decode_utf8(ch))

    def _read_escape(self) -> Optional[KeyEvent]:
        seq = self._read_ready_byte()
        if seq is None:
            return KeyEvent(ESC)
        if seq != b"[":
            # A lone Esc followed by a regular key
            self._pending.append(seq)
            return KeyEvent(ESC)
        final = self._read_ready_byte()
        if final in _ARROWS:
            return KeyEvent(_ARROWS[final])
        return None

    def _decode_utf8(self, first: bytes) -> str:
        data = first
        lead = first[0]
        if lead >= 0xF0:
            extra = 3
        elif lead >= 0xE0:
            extra = 2
        elif lead >= 0xC0:
            extra = 1
        else:
            extra = 0
        for _ in range(extra):
            nxt = self._read_ready_byte()
            if nxt is None:
                break
            data += nxt
        return data.decode("utf-8", errors="replace")
