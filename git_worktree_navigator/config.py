"""Configuration handling for git-worktree-navigator"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from git_worktree_navigator.constants import (
    CHORD_TIMEOUT,
    CONFIG_DIR_ENV,
    DEFAULT_HOTKEY_POOL,
    DOUBLE_TAP_WINDOW,
    POLL_INTERVAL,
    REPOS_DIR,
    RESERVED_KEYS,
)


def default_config_root() -> Path:
    """Return the config root, honoring the GW_CONFIG_DIR override."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "gw"


@dataclass
class Config:
    """Configuration for git-worktree-navigator with validation."""

    # Where the registry and global hooks live
    config_root: Path = field(default_factory=default_config_root)

    # Quick-select symbols, in assignment order
    hotkey_pool: str = DEFAULT_HOTKEY_POOL

    # Timing (seconds)
    chord_timeout: float = CHORD_TIMEOUT
    double_tap_window: float = DOUBLE_TAP_WINDOW
    poll_interval: float = POLL_INTERVAL

    # Ask remotes with ls-remote when no remote-tracking ref matches
    query_remotes: bool = True
    run_hooks: bool = True

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.config_root = Path(self.config_root).expanduser()
        self._validate_hotkey_pool()
        self._validate_timing()

    def _validate_hotkey_pool(self):
        """Validate the pool is non-empty, duplicate-free and avoids reserved keys."""
        if not self.hotkey_pool:
            raise ValueError("hotkey_pool cannot be empty")
        if len(set(self.hotkey_pool)) != len(self.hotkey_pool):
            raise ValueError(f"hotkey_pool contains duplicates: '{self.hotkey_pool}'")
        clashes = sorted(set(self.hotkey_pool) & RESERVED_KEYS)
        if clashes:
            raise ValueError(f"hotkey_pool uses reserved keys: {clashes}")

    def _validate_timing(self):
        """Validate timing values are positive."""
        for name in ("chord_timeout", "double_tap_window", "poll_interval"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "config_root": str(self.config_root),
            "hotkey_pool": self.hotkey_pool,
            "chord_timeout": self.chord_timeout,
            "double_tap_window": self.double_tap_window,
            "poll_interval": self.poll_interval,
            "query_remotes": self.query_remotes,
            "run_hooks": self.run_hooks,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "config_root",
            "hotkey_pool",
            "chord_timeout",
            "double_tap_window",
            "poll_interval",
            "query_remotes",
            "run_hooks",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @property
    def repos_dir(self) -> Path:
        return self.config_root / REPOS_DIR


def load_optional_config(config_root: Optional[Path] = None, **overrides) -> Config:
    """Build a Config, letting explicit keyword overrides win."""
    values = {k: v for k, v in overrides.items() if v is not None}
    if config_root is not None:
        values["config_root"] = config_root
    return Config.from_dict(values)
