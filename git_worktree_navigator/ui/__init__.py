"""Terminal surface, key input, rendering and prompts."""

from .input import KeyReader
from .prompts import RichPrompter
from .render import RichRenderer
from .terminal import TerminalSurface, open_surface

__all__ = ["KeyReader", "RichPrompter", "RichRenderer", "TerminalSurface", "open_surface"]
