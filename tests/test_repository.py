"""Tests for repository detection"""
from unittest.mock import Mock

import git
import pytest

from git_worktree_navigator.exceptions import ExternalToolError
from git_worktree_navigator.services.git.repository import detect_repo, to_tool_error


class TestDetectRepo:
    """Test detection from paths inside a repository."""

    def test_detect_from_toplevel(self, git_repo, temp_dir):
        context = detect_repo(git_repo.working_dir)
        assert context.toplevel == temp_dir / "app"
        assert context.repo_name == "app"
        assert context.git_common_dir == temp_dir / "app" / ".git"

    def test_detect_from_subdirectory(self, git_repo, temp_dir):
        sub = temp_dir / "app" / "src" / "pkg"
        sub.mkdir(parents=True)
        assert detect_repo(sub).toplevel == temp_dir / "app"

    def test_linked_worktree_shares_repo_id(self, git_repo, temp_dir):
        linked = temp_dir / "linked"
        git_repo.git.worktree("add", "-b", "side", str(linked))

        main = detect_repo(git_repo.working_dir)
        other = detect_repo(linked)

        assert other.toplevel == linked
        assert other.git_common_dir == main.git_common_dir
        assert other.repo_id == main.repo_id

    def test_not_a_repository(self, temp_dir):
        with pytest.raises(ExternalToolError):
            detect_repo(temp_dir)

    def test_missing_directory(self, temp_dir):
        with pytest.raises(ExternalToolError):
            detect_repo(temp_dir / "missing")


class TestToToolError:
    """Test GitCommandError translation."""

    def test_stderr_kept(self):
        error = git.exc.GitCommandError(["git", "fetch"], 128, stderr="fatal: no such remote")
        translated = to_tool_error("fetch", error)
        assert isinstance(translated, ExternalToolError)
        assert "fatal: no such remote" in str(translated)
        assert "128" in str(translated)

    def test_without_stderr(self):
        error = Mock(stderr="", status=1)
        assert str(to_tool_error("status", error)) == "git status failed: exit code 1"
