"""Render frames to the terminal with rich."""

from typing import List, Optional, TextIO

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from git_worktree_navigator.navigator.frame import Frame, FrameRow

# Lines used by the header, panel borders and footer
CHROME_LINES = 5


def visible_window(total: int, selected: int, height: int) -> range:
    """Rows to show so that ``selected`` stays on screen, centered when possible."""
    if height <= 0 or total <= height:
        return range(total)
    start = max(0, min(selected - height // 2, total - height))
    return range(start, start + height)


class RichRenderer:
    """Draws a Frame in place on a raw-mode terminal."""

    def __init__(self, stream: TextIO, console: Optional[Console] = None):
        self.stream = stream
        self.console = console or Console(file=stream, force_terminal=True, highlight=False)
        self._last: Optional[Frame] = None

    def draw(self, frame: Frame) -> None:
        if frame == self._last and not frame.full_redraw:
            return
        self._last = frame

        with self.console.capture() as capture:
            self.console.print(self.renderable(frame))
        # Raw mode has no output post-processing: clear each line and return the carriage ourselves
        body = capture.get().rstrip("\n").replace("\n", "\x1b[K\r\n")

        prefix = "\x1b[2J" if frame.full_redraw else ""
        self.stream.write(f"{prefix}\x1b[H{body}\x1b[K\x1b[J")
        self.stream.flush()

    def renderable(self, frame: Frame):
        header = Text()
        header.append(frame.title, style="bold cyan")
        if frame.filter_text or frame.filtering:
            header.append("  /", style="bold")
            header.append(frame.filter_text)
            if frame.filtering:
                header.append("_", style="blink")
        if frame.chord:
            header.append(f"  [{frame.chord}]", style="bold yellow")

        if frame.overlay is not None:
            body = Panel(Text(frame.overlay), title="help", border_style="cyan")
        else:
            body = Panel(self._table(frame), title=frame.list_title, title_align="left", border_style="blue")

        footer = Text(frame.footer, style="dim")
        return Group(header, body, footer)

    def _table(self, frame: Frame) -> Table:
        table = Table(box=None, show_header=False, expand=True, pad_edge=False)
        table.add_column("code", style="bold yellow", no_wrap=True, width=3)
        table.add_column("name", no_wrap=True, ratio=1)
        table.add_column("detail", style=frame.secondary_style, no_wrap=True, ratio=2, overflow="ellipsis")

        height = max(1, self.console.size.height - CHROME_LINES)
        rows: List[FrameRow] = frame.rows
        for index in visible_window(len(rows), frame.selected, height):
            row = rows[index]
            table.add_row(row.code, row.primary, row.secondary, style="reverse" if row.selected else None)
        if not rows:
            table.add_row("", Text("(no matches)", style="dim"), "")
        return table
