"""Shared constants for git-worktree-navigator."""

from typing import FrozenSet

# Environment variable overriding the config root
CONFIG_DIR_ENV = "GW_CONFIG_DIR"

GLOBAL_CONFIG_FILE = "config.json"
REPO_CONFIG_FILE = "config.json"
REPOS_DIR = "repos"

# Mnemonic pool shared by both screens. Reserved keys: j/k, g (gg), G, q, n, /, ?
DEFAULT_HOTKEY_POOL = "asdfhlwertyuiopzxcvbm"
RESERVED_KEYS: FrozenSet[str] = frozenset("jkgGqn/?")

# Timing (seconds)
CHORD_TIMEOUT = 1.5
DOUBLE_TAP_WINDOW = 0.6
POLL_INTERVAL = 0.05

# Directory name used when a branch sanitizes to nothing
FALLBACK_PATH_SEGMENT = "branch"

DETACHED_LABEL = "(detached)"

# Status line texts
STATUS_REPO_KEYS = "j/k move, gg/G top/bottom, / filter, enter select, n new, ? help, q quit"
STATUS_WORKTREE_KEYS = (
    "j/k move, / filter, enter select, n new, ctrl+d delete, esc back, ? help, q quit"
)
STATUS_FILTER = "filter: type, enter to apply"
STATUS_FILTER_APPLIED = "filter applied"
STATUS_FILTER_CANCELLED = "cancelled filter"
STATUS_HELP = "press ?/esc/q to close help"
STATUS_NOTHING_SELECTED = "nothing selected"
STATUS_NEW_CANCELLED = "new cancelled"
STATUS_CREATED = "worktree created; enter to select"
STATUS_REMOVED = "worktree removed"
STATUS_DELETE_CANCELLED = "delete cancelled"

# Prompt labels
PROMPT_SPEC = "Branch name or GitHub PR URL"
PROMPT_BASE = "Base ref (blank for HEAD)"
PROMPT_WORKTREES_DIR = "Where should I put all worktrees for this repo?"
PROMPT_WORKTREES_PATH = "Worktrees directory path"
PROMPT_REMOTE = "Which remote?"

NEW_WORKTREE_RULES = """New worktree input rules (single text field):
- GitHub PR URL only (must be a URL): https://github.com/OWNER/REPO/pull/<N>
- Otherwise, treat input as a branch name.
- If branch exists locally: use it as-is (no fetch / no remote comparison).
- If branch missing locally and exists on remote: fetch it, create a local tracking branch, then create the worktree.
- If branch missing locally and not on remote: create a new branch, then create the worktree.
- Remote selection: if exactly 1 remote has it, use it; otherwise you will be prompted to choose a remote.
"""

HELP_REPO = """Repo Picker

Keys:
- j/k: move
- gg/G: top/bottom
- /: filter
- enter: open repo's worktrees
- n: create a new worktree for the highlighted repo
- ?: help
- q/esc: quit

""" + NEW_WORKTREE_RULES + """
Tip: select a repo, then use enter to see its worktrees.
"""

HELP_WORKTREE = """Worktree Picker

Keys:
- j/k: move
- gg/G: top/bottom
- /: filter
- enter: select highlighted worktree
- n: create a new worktree for this repo
- ctrl+d: delete highlighted worktree (confirmation; branch preserved)
- esc: back to repos
- ?: help
- q: quit

""" + NEW_WORKTREE_RULES

ZSH_INIT = """# gw shell integration (zsh)
gw() {
  if [[ "$1" == "go" ]]; then
    local dest
    dest="$(command gw go "${@:2}")" || return $?
    if [[ -n "$dest" ]]; then
      cd "$dest" || return $?
    fi
  else
    command gw "$@"
  fi
}"""
