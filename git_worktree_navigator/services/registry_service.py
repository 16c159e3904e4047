"""Registry of known repositories, persisted as one JSON file per repository."""
import json
import os
from pathlib import Path
from typing import List, Optional

from git_worktree_navigator.constants import GLOBAL_CONFIG_FILE, REPO_CONFIG_FILE, REPOS_DIR
from git_worktree_navigator.exceptions import ConfigIOError
from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.models.repo import RepoContext, RepoRecord

logger = get_logger(__name__)


class RegistryService:
    """Reads and writes repository records under the config root.

    Layout::

        <root>/config.json                  global hooks
        <root>/repos/<repo_id>/config.json  one RepoRecord
    """

    def __init__(self, config_root: Path):
        """Initialize the registry.

        Args:
            config_root: Directory holding the global config and the repos/ tree
        """
        self.config_root = Path(config_root)
        self.repos_dir = self.config_root / REPOS_DIR

    def record_path(self, repo_id: str) -> Path:
        return self.repos_dir / repo_id / REPO_CONFIG_FILE

    @property
    def global_config_path(self) -> Path:
        return self.config_root / GLOBAL_CONFIG_FILE

    def _read_json(self, path: Path) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigIOError(str(path), e.strerror or str(e))
        except json.JSONDecodeError as e:
            raise ConfigIOError(str(path), f"invalid JSON: {e}")
        if not isinstance(data, dict):
            raise ConfigIOError(str(path), "expected a JSON object")
        return data

    def _write_json(self, path: Path, data: dict) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file so a crash never leaves half a record
            tmp_path = path.with_suffix(".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, path)
        except OSError as e:
            raise ConfigIOError(str(path), e.strerror or str(e))

    def list_known_repositories(self) -> List[RepoRecord]:
        """Return every readable repository record, sorted by display name.

        Unreadable or malformed records are skipped with a warning.
        """
        if not self.repos_dir.exists():
            return []

        try:
            children = sorted(self.repos_dir.iterdir())
        except OSError as e:
            raise ConfigIOError(str(self.repos_dir), e.strerror or str(e))

        records = []
        for child in children:
            if not child.is_dir():
                continue
            try:
                record = RepoRecord.from_dict(child.name, self._read_json(child / REPO_CONFIG_FILE))
            except ConfigIOError as e:
                logger.warning(f"Skipping repository record: {e}")
                continue
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed repository record {child}: {e}")
                continue
            records.append(record)

        records.sort(key=lambda r: r.repo_name)
        logger.debug(f"Loaded {len(records)} repository records")
        return records

    def load_record(self, repo_id: str) -> Optional[RepoRecord]:
        """Load one record; None when it does not exist."""
        path = self.record_path(repo_id)
        if not path.exists():
            return None
        data = self._read_json(path)
        try:
            return RepoRecord.from_dict(repo_id, data)
        except (KeyError, TypeError) as e:
            raise ConfigIOError(str(path), f"malformed record: {e}")

    def save_record(self, record: RepoRecord) -> None:
        self._write_json(self.record_path(record.repo_id), record.to_dict())
        logger.debug(f"Saved repository record for {record.repo_name} ({record.repo_id[:12]})")

    def register_if_unknown(self, context: RepoContext) -> RepoRecord:
        """Return the record for ``context``, creating a stub when it is new."""
        record = self.load_record(context.repo_id)
        if record is not None:
            return record
        record = RepoRecord.from_context(context)
        self.save_record(record)
        logger.info(f"Registered repository {record.repo_name} at {record.anchor_path}")
        return record

    def persist_anchor(self, repo_id: str, anchor: Path) -> None:
        """Store ``anchor`` as the repository's known-good working directory."""
        record = self.load_record(repo_id)
        if record is None:
            logger.debug(f"Not persisting anchor for unknown repository {repo_id[:12]}")
            return
        if record.anchor_path == Path(anchor):
            return
        record.anchor_path = Path(anchor)
        self.save_record(record)
        logger.debug(f"Anchor for {record.repo_name} is now {anchor}")

    def load_global_hooks(self) -> List[str]:
        """Hook commands from the global config; an absent file means no hooks."""
        path = self.global_config_path
        if not path.exists():
            return []
        data = self._read_json(path)
        try:
            return [hook["command"] for hook in data.get("hooks", [])]
        except (KeyError, TypeError) as e:
            raise ConfigIOError(str(path), f"malformed hooks: {e}")
