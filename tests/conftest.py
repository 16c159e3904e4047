"""Pytest fixtures for git-worktree-navigator tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from git_worktree_navigator.config import Config
from git_worktree_navigator.models.repo import RepoRecord, repo_id_for
from git_worktree_navigator.services.git.repository import detect_repo
from git_worktree_navigator.services.registry_service import RegistryService


class FakeClock:
    """Clock driven by the test."""

    def __init__(self, start: float = 100.0):
        self.t = start

    def now(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


def make_record(name: str, anchor: str = None) -> RepoRecord:
    """A registry record for a repository that does not need to exist on disk."""
    common = Path(f"/src/{name}/.git")
    return RepoRecord(
        repo_id=repo_id_for(common),
        repo_name=name,
        git_common_dir=common,
        anchor_path=Path(anchor or f"/src/{name}"),
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def config_root(temp_dir, monkeypatch):
    """An isolated config root, also exported through GW_CONFIG_DIR."""
    root = temp_dir / "cfg"
    monkeypatch.setenv("GW_CONFIG_DIR", str(root))
    return root


@pytest.fixture
def config(config_root):
    return Config(config_root=config_root)


@pytest.fixture
def registry(config_root):
    return RegistryService(config_root)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "app"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.git.branch("-M", "main")

    yield repo

    repo.close()


@pytest.fixture
def repo_context(git_repo):
    return detect_repo(git_repo.working_dir)


@pytest.fixture
def clone_repo(git_repo, temp_dir):
    """A clone of git_repo with git_repo as its origin."""
    git_repo.git.branch("shared")
    clone = git.Repo.clone_from(git_repo.working_dir, temp_dir / "clone")
    clone.config_writer().set_value("user", "name", "Test User").release()
    clone.config_writer().set_value("user", "email", "test@example.com").release()

    yield clone

    clone.close()


@pytest.fixture
def mock_prompter():
    prompter = Mock()
    prompter.read_line = Mock(return_value="")
    prompter.choose = Mock(return_value=0)
    return prompter
