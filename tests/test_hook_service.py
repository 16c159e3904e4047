"""Tests for HookService"""
import pytest

from git_worktree_navigator.exceptions import HookError
from git_worktree_navigator.services.hook_service import HookService


class TestHookService:
    """Test hook execution."""

    def test_environment_and_cwd(self, temp_dir):
        worktree = temp_dir / "wt"
        worktree.mkdir()
        HookService().run_hooks(
            ['printf "%s|%s|%s|%s" "$GW_WORKTREE_PATH" "$GW_BRANCH" "$GW_REPO_ROOT" "$(pwd -P)" > env.txt'],
            worktree,
            "feature/x",
            temp_dir / "repo",
        )
        values = (worktree / "env.txt").read_text().split("|")
        assert values == [str(worktree), "feature/x", str(temp_dir / "repo"), str(worktree)]

    def test_failure_stops_sequence(self, temp_dir):
        with pytest.raises(HookError) as excinfo:
            HookService().run_hooks(["false", "touch after"], temp_dir, "b", temp_dir)
        assert excinfo.value.command == "false"
        assert excinfo.value.status == 1
        assert not (temp_dir / "after").exists()

    def test_no_hooks(self, temp_dir):
        HookService().run_hooks([], temp_dir / "missing", "b", temp_dir)
