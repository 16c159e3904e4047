"""Key events consumed by the navigator."""

from dataclasses import dataclass, field
from typing import FrozenSet

# Named key codes; printable keys use the character itself
ENTER = "enter"
ESC = "esc"
BACKSPACE = "backspace"
TAB = "tab"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"

CTRL = "ctrl"


@dataclass(frozen=True)
class KeyEvent:
    """A single key press or release."""

    code: str
    modifiers: FrozenSet[str] = field(default_factory=frozenset)
    is_press: bool = True

    @property
    def ctrl(self) -> bool:
        return CTRL in self.modifiers

    @property
    def is_char(self) -> bool:
        """True for a single printable character."""
        return len(self.code) == 1 and self.code.isprintable()

    @classmethod
    def char(cls, ch: str) -> "KeyEvent":
        return cls(ch)

    @classmethod
    def with_ctrl(cls, ch: str) -> "KeyEvent":
        return cls(ch, frozenset({CTRL}))
