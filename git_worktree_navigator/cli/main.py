"""Command-line interface for gw"""

import dataclasses
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from git_worktree_navigator.cli.args import parse_args
from git_worktree_navigator.config import Config, load_optional_config
from git_worktree_navigator.constants import ZSH_INIT
from git_worktree_navigator.exceptions import ExternalToolError
from git_worktree_navigator.logging_config import get_logger, setup_logging
from git_worktree_navigator.navigator import Navigator
from git_worktree_navigator.services.creation_service import CreationService
from git_worktree_navigator.services.git.repository import detect_repo_from_cwd
from git_worktree_navigator.services.git.worktrees import WorktreeService
from git_worktree_navigator.services.registry_service import RegistryService
from git_worktree_navigator.ui.input import KeyReader
from git_worktree_navigator.ui.prompts import RichPrompter
from git_worktree_navigator.ui.render import RichRenderer
from git_worktree_navigator.ui.terminal import open_surface

# stdout carries machine-readable output only; everything for humans goes to stderr
err_console = Console(stderr=True)

logger = get_logger(__name__)


def _out(text) -> None:
    print(text)


def _current_repo_or_none():
    try:
        return detect_repo_from_cwd()
    except ExternalToolError as e:
        logger.debug(f"Not inside a repository: {e}")
        return None


def cmd_init(args, config: Config) -> int:
    _out(ZSH_INIT)
    return 0


def cmd_list(args, config: Config) -> int:
    context = detect_repo_from_cwd()
    registry = RegistryService(config.config_root)
    record = registry.register_if_unknown(context)
    listing = WorktreeService(registry).list_worktrees(record)
    for entry in listing.entries:
        _out(entry)
    return 0


def cmd_new(args, config: Config) -> int:
    context = detect_repo_from_cwd()
    registry = RegistryService(config.config_root)
    registry.register_if_unknown(context)

    prompter = RichPrompter(err_console) if sys.stdin.isatty() else None
    creation = CreationService(registry, config, prompter=prompter)

    if args.worktrees_dir is not None:
        creation.worktrees_dir(context, override=args.worktrees_dir)

    explicit_path = None
    if args.path is not None:
        explicit_path = Path(args.path).expanduser().resolve()
        resolver = creation.resolver_for(context, worktrees_dir=lambda: explicit_path.parent)
    else:
        resolver = creation.resolver_for(context)

    plan = resolver.resolve(args.spec, explicit_base=args.base)
    if explicit_path is not None:
        plan = dataclasses.replace(plan, destination=explicit_path)

    destination = creation.create_worktree(plan, run_hooks=False if args.no_hooks else None)
    err_console.print(f"[green]Created worktree for {plan.branch}[/green] ({plan.source})")
    _out(destination)
    return 0


def cmd_go(args, config: Config) -> int:
    current = _current_repo_or_none()
    registry = RegistryService(config.config_root)
    if current is not None:
        registry.register_if_unknown(current)

    surface = open_surface()
    # Prompts read from the same terminal as the keys, even when stdin is redirected
    prompt_stream = surface.prompt_stream()
    try:
        stream = sys.stdout if surface.output_fd == sys.stdout.fileno() else sys.stderr
        prompter = RichPrompter(err_console, stream=prompt_stream)
        navigator = Navigator(
            config=config,
            registry=registry,
            worktrees=WorktreeService(registry),
            creation=CreationService(registry, config, prompter=prompter),
            prompter=prompter,
            surface=surface,
            keys=KeyReader(surface.input_fd),
            renderer=RichRenderer(stream),
            current_repo=current,
        )
        selection = navigator.run()
    finally:
        if prompt_stream is not None:
            prompt_stream.close()
        surface.close()

    if selection is None:
        # The shell wrapper treats a failing `gw go` as cancel
        return 1
    _out(selection.worktree_path)
    return 0


def cmd_remove(args, config: Config) -> int:
    context = detect_repo_from_cwd()
    target = Path(args.path).expanduser().resolve()
    if not args.yes:
        if not sys.stdin.isatty():
            raise ExternalToolError("worktree remove", "refusing to remove without --yes when not interactive")
        if not RichPrompter(err_console).confirm(f"Remove worktree {target}? (branch is kept)"):
            err_console.print("[yellow]Cancelled[/yellow]")
            return 1
    WorktreeService(RegistryService(config.config_root)).remove_worktree(
        context.toplevel, target, force=args.force
    )
    err_console.print(f"[green]Removed worktree[/green] {target}")
    return 0


def cmd_config(args, config: Config) -> int:
    registry = RegistryService(config.config_root)
    _out(f"config_root={config.config_root}")
    _out(f"global_config={registry.global_config_path}")
    _out(f"repos_dir={registry.repos_dir}")
    context = _current_repo_or_none()
    if context is not None:
        _out(f"repo_config={registry.record_path(context.repo_id)}")
        record = registry.load_record(context.repo_id)
        if record is not None and record.worktrees_dir is not None:
            _out(f"worktrees_dir={record.worktrees_dir}")
    if args.verbose:
        for key, value in config.to_dict().items():
            _out(f"{key}={value}")
    return 0


def cmd_hooks(args, config: Config) -> int:
    registry = RegistryService(config.config_root)
    for command in registry.load_global_hooks():
        _out(f"global: {command}")
    context = _current_repo_or_none()
    if context is not None:
        record = registry.load_record(context.repo_id)
        if record is not None:
            for command in record.hooks:
                _out(f"repo: {command}")
    return 0


COMMANDS = {
    "init": cmd_init,
    "list": cmd_list,
    "new": cmd_new,
    "go": cmd_go,
    "remove": cmd_remove,
    "config": cmd_config,
    "hooks": cmd_hooks,
}


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    try:
        config = load_optional_config(verbose=parsed_args.verbose, debug=parsed_args.debug)

        # The navigator owns the terminal, so its logs go to a file
        setup_logging(
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            tui_mode=parsed_args.command == "go",
            log_dir=config.config_root,
        )

        if parsed_args.debug:
            err_console.print("[yellow]Debug mode enabled[/yellow]")
            for key, value in config.to_dict().items():
                err_console.print(f"  {key}: {value}")

        return COMMANDS[parsed_args.command](parsed_args, config)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        if parsed_args.debug:
            err_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
