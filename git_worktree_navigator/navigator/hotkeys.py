"""Mnemonic quick-select codes and the chord buffer that resolves them."""

from typing import Dict, List, Optional, Sequence

MAX_CHORD_LENGTH = 2


def assign_hotkeys(n: int, pool: Sequence[str]) -> List[str]:
    """Assign quick-select codes to ``n`` visible items.

    The first ``len(pool)`` items get single symbols in pool order. The rest get
    two-symbol codes from the row-major cartesian product of the pool, so codes
    are unique for ``n <= K + K*K`` and repeat beyond that.

    Example (pool ``asd``): ``a s d aa as ad sa ...``
    """
    k = len(pool)
    if k == 0:
        return []

    codes = []
    for i in range(n):
        if i < k:
            codes.append(pool[i])
        else:
            j = i - k
            codes.append(pool[(j // k) % k] + pool[j % k])
    return codes


def code_map(codes: Sequence[str]) -> Dict[str, int]:
    """Map each code to its visible position; a repeated code keeps the last position."""
    return {code: i for i, code in enumerate(codes)}


def has_prefix(buffer: str, codes: Sequence[str]) -> bool:
    return any(code.startswith(buffer) for code in codes)


class ChordBuffer:
    """Accumulates up to two mnemonic keystrokes.

    Time is passed in by the caller so expiry can be driven by a fake clock.
    """

    def __init__(self, timeout: float):
        self.timeout = timeout
        self.text = ""
        self.updated_at = 0.0

    def __bool__(self) -> bool:
        return bool(self.text)

    def clear(self) -> None:
        self.text = ""

    def expire(self, now: float) -> bool:
        """Drop stale partial input. Returns True when something was cleared."""
        if self.text and now - self.updated_at > self.timeout:
            self.text = ""
            return True
        return False

    def feed(self, ch: str, codes: Sequence[str], now: float) -> Optional[int]:
        """Append ``ch`` and return the visible position it selects, if any."""
        if len(self.text) >= MAX_CHORD_LENGTH:
            self.text = ""
        self.text += ch
        self.updated_at = now

        selected = code_map(codes).get(self.text)
        if selected is not None:
            # No three-key codes exist, so a full-length match is consumed
            if len(self.text) >= MAX_CHORD_LENGTH:
                self.text = ""
        elif not has_prefix(self.text, codes):
            self.text = ""
        elif len(self.text) >= MAX_CHORD_LENGTH:
            self.text = ""
        return selected
