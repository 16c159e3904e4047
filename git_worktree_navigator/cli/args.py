"""Command-line argument parsing for gw."""

import argparse
from pathlib import Path

from git_worktree_navigator.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gw",
        description="Jump between repositories and their git worktrees",
        epilog="Shell integration: eval \"$(gw init zsh)\" lets `gw go` change directory.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"gw {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    init = subparsers.add_parser("init", help="Print shell integration snippets")
    init.add_argument("shell", choices=["zsh"], help="Shell to integrate with")

    subparsers.add_parser("list", help="List worktrees for the current repository")

    new = subparsers.add_parser("new", help="Create a worktree from a branch name or GitHub PR URL")
    new.add_argument("spec", metavar="BRANCH_OR_PR_URL", help="Branch name or pull request URL")
    new.add_argument(
        "--worktrees-dir",
        type=Path,
        help="Override the repository's worktrees directory (nested per repository) and persist it",
    )
    new.add_argument(
        "--path", type=Path, help="Create the worktree at an explicit path instead of <worktrees_dir>/<branch>"
    )
    new.add_argument("--base", help="Base ref to create a new branch from (default: HEAD)")
    new.add_argument("--no-hooks", action="store_true", help="Skip running hooks")

    subparsers.add_parser(
        "go", help="Interactive picker to jump between repositories and worktrees (prints the selected path)"
    )

    remove = subparsers.add_parser("remove", help="Remove a worktree (its branch is kept)")
    remove.add_argument("path", type=Path, help="Worktree path")
    remove.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    remove.add_argument("--force", action="store_true", help="Remove even with local changes")

    subparsers.add_parser("config", help="Print effective config paths and values for the current repository")
    subparsers.add_parser("hooks", help="Show configured hooks (global and per repository)")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments; no command means ``go``."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "go"
    return args
