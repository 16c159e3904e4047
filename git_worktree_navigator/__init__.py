"""
git-worktree-navigator - jump between repositories and their worktrees
"""

from .__version__ import __version__
from .navigator import Navigator, Selection
from .cli.main import main

__all__ = ["Navigator", "Selection", "main", "__version__"]
