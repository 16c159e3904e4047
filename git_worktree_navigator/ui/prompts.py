"""Line prompts shown while the navigator surface is suspended."""

from typing import Optional, Sequence, TextIO

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt


class RichPrompter:
    """Asks questions on stderr so stdout stays free for the selected path.

    Answers are read from ``stream`` when given (the terminal the navigator
    reads keys from), else from stdin.
    """

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.console = console or Console(stderr=True)
        self.stream = stream

    def read_line(self, label: str, allow_empty: bool = False) -> str:
        while True:
            answer = Prompt.ask(label, console=self.console, default="", show_default=False, stream=self.stream)
            if answer.strip() or allow_empty:
                return answer
            self.console.print("[yellow]A value is required[/yellow]")

    def choose(self, label: str, options: Sequence[str]) -> int:
        """Return the index of the chosen option."""
        self.console.print(f"[bold]{label}[/bold]")
        for number, option in enumerate(options, start=1):
            self.console.print(f"  {number}) {option}")
        choices = [str(number) for number in range(1, len(options) + 1)]
        answer = IntPrompt.ask("Choice", console=self.console, choices=choices, default=1, stream=self.stream)
        return answer - 1

    def confirm(self, label: str, default: bool = False) -> bool:
        return Confirm.ask(label, console=self.console, default=default, stream=self.stream)
