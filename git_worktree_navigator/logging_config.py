"""Logging configuration for gw"""
import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE = 'git_worktree_navigator'

# gw only ever logs warnings and errors by default; -v adds INFO, --debug adds DEBUG
LEVEL_COLORS = {
    logging.DEBUG: '\033[2m',     # Dim
    logging.WARNING: '\033[33m',  # Yellow
    logging.ERROR: '\033[31m',    # Red
}
RESET = '\033[0m'

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Colors whole lines by level when stderr is a terminal. INFO stays plain."""

    def format(self, record):
        line = super().format(record)
        if not sys.stderr.isatty():
            return line
        color = LEVEL_COLORS.get(min(record.levelno, logging.ERROR))
        return f"{color}{line}{RESET}" if color else line


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    tui_mode: bool = False,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages and write gw.log
        tui_mode: If True, log to gw.log only; the navigator owns the terminal
        log_dir: Directory for gw.log (defaults to ~/.config/gw)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    # The file handler wants everything in TUI mode; handlers filter on their own
    root_logger.setLevel(logging.DEBUG if tui_mode else level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if tui_mode or debug:
        log_dir = log_dir or (Path.home() / '.config' / 'gw')
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / 'gw.log', mode='w')  # Overwrite each run
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)

    # Anything written to stderr would land on the alternate screen
    if not tui_mode:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColoredFormatter(fmt='gw: %(message)s' if not debug else '%(name)s: %(message)s'))
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Logger named ``gw.<module>``, e.g. ``gw.navigator.core``."""
    if name == PACKAGE or name.startswith(PACKAGE + '.'):
        name = 'gw' + name[len(PACKAGE):]
    return logging.getLogger(name)
