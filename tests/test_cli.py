"""Tests for the gw command line"""
import json
from pathlib import Path

import pytest

from git_worktree_navigator.__version__ import __version__
from git_worktree_navigator.cli.args import parse_args
from git_worktree_navigator.cli.main import main


@pytest.fixture
def in_repo(git_repo, config_root, monkeypatch):
    """Run commands from inside git_repo with an isolated config root."""
    monkeypatch.chdir(git_repo.working_dir)
    return Path(git_repo.working_dir)


def _stdout_lines(capsys):
    return capsys.readouterr().out.splitlines()


class TestArgs:
    """Test argument parsing."""

    def test_no_command_means_go(self):
        assert parse_args([]).command == "go"

    def test_new_options(self):
        args = parse_args(["new", "feature", "--worktrees-dir", "/wt", "--base", "develop", "--no-hooks"])
        assert args.spec == "feature"
        assert args.worktrees_dir == Path("/wt")
        assert args.base == "develop"
        assert args.no_hooks is True
        assert args.path is None

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            parse_args(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestCommands:
    """Test each subcommand end to end."""

    def test_init_zsh(self, capsys):
        assert main(["init", "zsh"]) == 0
        out = capsys.readouterr().out
        assert "command gw go" in out
        assert 'cd "$dest"' in out

    def test_go_without_tty(self, temp_dir, config_root, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        assert main([]) == 1
        assert "no TTY" in capsys.readouterr().err

    def test_list(self, in_repo, git_repo, temp_dir, capsys):
        linked = temp_dir / "wt"
        git_repo.git.worktree("add", "-b", "feat", str(linked))

        assert main(["list"]) == 0
        lines = _stdout_lines(capsys)
        assert lines == [f"{in_repo}\tmain", f"{linked}\tfeat"]

    def test_list_outside_repository(self, temp_dir, config_root, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        assert main(["list"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_new_then_config(self, in_repo, git_repo, temp_dir, capsys):
        worktrees = temp_dir / "worktrees"
        assert main(["new", "feat/x", "--worktrees-dir", str(worktrees), "--no-hooks"]) == 0
        created = Path(_stdout_lines(capsys)[-1])

        assert created == worktrees / "app" / "feat" / "x"
        assert created.is_dir()
        assert "feat/x" in [head.name for head in git_repo.heads]

        assert main(["config"]) == 0
        lines = _stdout_lines(capsys)
        assert any(line.startswith("config_root=") for line in lines)
        assert any(line.startswith("global_config=") for line in lines)
        assert any(line.startswith("repo_config=") for line in lines)
        assert f"worktrees_dir={worktrees / 'app'}" in lines

    def test_new_with_explicit_path(self, in_repo, temp_dir, capsys):
        target = temp_dir / "exact"
        assert main(["new", "side", "--path", str(target), "--no-hooks"]) == 0
        assert Path(_stdout_lines(capsys)[-1]) == target
        assert (target / "README.md").exists()

    def test_new_without_worktrees_dir_and_no_tty(self, in_repo, capsys):
        assert main(["new", "feature"]) == 1
        assert "--worktrees-dir" in capsys.readouterr().err

    def test_remove(self, in_repo, git_repo, temp_dir):
        linked = temp_dir / "wt"
        git_repo.git.worktree("add", "-b", "feat", str(linked))

        assert main(["remove", str(linked), "--yes"]) == 0
        assert not linked.exists()
        assert str(linked) not in git_repo.git.worktree("list")

    def test_remove_refuses_main(self, in_repo, capsys):
        assert main(["remove", str(in_repo), "--yes"]) == 1
        assert "refusing" in capsys.readouterr().err
        assert in_repo.exists()

    def test_hooks(self, in_repo, config_root, capsys):
        assert main(["new", "hooked", "--worktrees-dir", str(config_root.parent / "wt"), "--no-hooks"]) == 0
        config_root.joinpath("config.json").write_text(json.dumps({"hooks": [{"command": "echo hook"}]}))
        record_path = next((config_root / "repos").glob("*/config.json"))
        record = json.loads(record_path.read_text())
        record["hooks"] = [{"command": "echo repo hook"}]
        record_path.write_text(json.dumps(record))
        capsys.readouterr()

        assert main(["hooks"]) == 0
        assert _stdout_lines(capsys) == ["global: echo hook", "repo: echo repo hook"]
