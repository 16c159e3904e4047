"""Frame description handed to the render sink each cycle."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class FrameRow:
    code: str
    primary: str
    secondary: str
    selected: bool = False


@dataclass(frozen=True)
class Frame:
    """One full screen: header, list region, footer and an optional overlay."""

    title: str
    filter_text: str
    filtering: bool
    chord: str
    list_title: str
    rows: List[FrameRow] = field(default_factory=list)
    selected: int = 0
    footer: str = ""
    overlay: Optional[str] = None
    full_redraw: bool = False
    secondary_style: str = "bright_black"
