"""Worktree creation: resolving the worktrees directory, running git, hooks."""

from pathlib import Path
from typing import Callable, Optional

import git

from git_worktree_navigator.config import Config
from git_worktree_navigator.constants import PROMPT_REMOTE, PROMPT_WORKTREES_DIR, PROMPT_WORKTREES_PATH
from git_worktree_navigator.exceptions import ConfigIOError, ExternalToolError
from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.models.plan import CreationPlan, SourceKind
from git_worktree_navigator.models.repo import RepoContext
from git_worktree_navigator.services.git.queries import GitQueries
from git_worktree_navigator.services.git.repository import to_tool_error
from git_worktree_navigator.services.git.spec_resolver import SpecResolver
from git_worktree_navigator.services.hook_service import HookService
from git_worktree_navigator.services.registry_service import RegistryService

logger = get_logger(__name__)


class CreationService:
    """Creates worktrees from resolved plans.

    The prompter is only needed when a decision has to be made interactively
    (worktrees directory not configured yet, several candidate remotes).
    """

    def __init__(
        self,
        registry: RegistryService,
        config: Config,
        prompter=None,
        hooks: Optional[HookService] = None,
    ):
        self.registry = registry
        self.config = config
        self.prompter = prompter
        self.hooks = hooks or HookService()

    def _choose_remote(self, label: str, remotes):
        return remotes[self.prompter.choose(label or PROMPT_REMOTE, list(remotes))]

    def resolver_for(
        self, context: RepoContext, worktrees_dir: Optional[Callable[[], Path]] = None
    ) -> SpecResolver:
        """A resolver bound to ``context`` and this service's prompter.

        ``worktrees_dir`` replaces the configured worktrees directory lookup.
        """
        return SpecResolver(
            repo=context,
            queries=GitQueries(context.toplevel, query_remotes=self.config.query_remotes),
            worktrees_dir=worktrees_dir or (lambda: self.worktrees_dir(context)),
            choose_remote=self._choose_remote if self.prompter is not None else None,
        )

    def worktrees_dir(self, context: RepoContext, override: Optional[Path] = None) -> Path:
        """Return the directory holding this repository's worktrees.

        An ``override`` is treated as a shared base and nested per repository.
        Without a configured directory the user is asked once and the answer is
        persisted.

        Raises:
            ConfigIOError: the choice could not be created or persisted
            ExternalToolError: no directory is configured and nobody can be asked
        """
        record = self.registry.register_if_unknown(context)

        if override is not None:
            chosen = Path(override).expanduser() / context.repo_name
        elif record.worktrees_dir is not None:
            return record.worktrees_dir
        else:
            chosen = self._prompt_worktrees_dir(context)

        try:
            chosen.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigIOError(str(chosen), e.strerror or str(e))
        record.worktrees_dir = chosen
        self.registry.save_record(record)
        logger.info(f"Worktrees for {context.repo_name} will live in {chosen}")
        return chosen

    def _prompt_worktrees_dir(self, context: RepoContext) -> Path:
        if self.prompter is None:
            raise ExternalToolError(
                "worktree add", "no worktrees directory configured (pass --worktrees-dir)"
            )
        options = [
            Path.home() / "worktrees" / context.repo_name,
            context.toplevel.parent / f"{context.repo_name}-worktrees",
        ]
        labels = [str(p) for p in options] + ["Somewhere else"]
        index = self.prompter.choose(PROMPT_WORKTREES_DIR, labels)
        if index < len(options):
            return options[index]
        raw = self.prompter.read_line(PROMPT_WORKTREES_PATH)
        return Path(raw.strip()).expanduser()

    def create_worktree(self, plan: CreationPlan, run_hooks: Optional[bool] = None) -> Path:
        """Create the worktree described by ``plan`` and return its path.

        Raises:
            ExternalToolError: a git command failed
            HookError: a post-creation hook failed (the worktree stays)
        """
        destination = Path(plan.destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExternalToolError("worktree add", f"cannot create {destination.parent}: {e}")

        cmd = git.Git(str(plan.repo.toplevel))
        source = plan.source
        try:
            if source.kind is SourceKind.EXISTING_LOCAL:
                cmd.worktree("add", str(destination), plan.branch)
            elif source.kind is SourceKind.EXISTING_REMOTE:
                cmd.fetch(source.remote, plan.branch)
                cmd.worktree(
                    "add", "--track", "-b", plan.branch, str(destination), f"{source.remote}/{plan.branch}"
                )
            elif source.kind is SourceKind.PULL_REQUEST:
                cmd.fetch(source.remote, f"pull/{source.pr_number}/head")
                cmd.branch("-f", plan.branch, "FETCH_HEAD")
                cmd.worktree("add", str(destination), plan.branch)
            else:
                args = ["add", "-b", plan.branch, str(destination)]
                if plan.base:
                    args.append(plan.base)
                cmd.worktree(*args)
        except git.exc.GitCommandError as e:
            raise to_tool_error("worktree add", e)
        logger.info(f"Created worktree {destination} for {plan.branch} [{source}]")

        # The new worktree is known-good, make it the anchor
        record = self.registry.register_if_unknown(plan.repo)
        self.registry.persist_anchor(record.repo_id, destination)

        if run_hooks is None:
            run_hooks = self.config.run_hooks
        if run_hooks:
            hooks = self.registry.load_global_hooks() + list(record.hooks)
            self.hooks.run_hooks(hooks, destination, plan.branch, plan.repo.toplevel)
        return destination
