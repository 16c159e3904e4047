"""The navigator: event loop and key transitions for the repository and worktree screens."""

import dataclasses
import os
from pathlib import Path
from typing import Callable, Dict, Optional

from git_worktree_navigator.config import Config
from git_worktree_navigator.constants import (
    HELP_REPO,
    HELP_WORKTREE,
    PROMPT_BASE,
    PROMPT_SPEC,
    STATUS_CREATED,
    STATUS_DELETE_CANCELLED,
    STATUS_FILTER,
    STATUS_FILTER_APPLIED,
    STATUS_FILTER_CANCELLED,
    STATUS_HELP,
    STATUS_NEW_CANCELLED,
    STATUS_NOTHING_SELECTED,
    STATUS_REMOVED,
    STATUS_REPO_KEYS,
    STATUS_WORKTREE_KEYS,
)
from git_worktree_navigator.exceptions import ConfigIOError, NavigatorError, NoSelectionError
from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.models.plan import SourceKind
from git_worktree_navigator.models.repo import RepoContext, RepoRecord
from git_worktree_navigator.models.worktree import WorktreeEntry
from git_worktree_navigator.navigator.events import BACKSPACE, DOWN, ENTER, ESC, UP, KeyEvent
from git_worktree_navigator.navigator.frame import Frame, FrameRow
from git_worktree_navigator.navigator.hotkeys import ChordBuffer
from git_worktree_navigator.navigator.listing import HotkeyList
from git_worktree_navigator.navigator.state import (
    Clock,
    Mode,
    MonotonicClock,
    NavigatorState,
    Screen,
    Selection,
    View,
)

logger = get_logger(__name__)


class Navigator:
    """Two-level picker: repositories, then the worktrees of one repository.

    Collaborators are injected so the transition logic can be driven from tests
    with fakes; the only place that touches the terminal is ``run``.
    """

    def __init__(
        self,
        config: Config,
        registry,
        worktrees,
        creation,
        prompter,
        surface,
        keys,
        renderer,
        clock: Optional[Clock] = None,
        current_repo: Optional[RepoContext] = None,
    ):
        """Initialize the navigator.

        Args:
            config: Timing and hotkey settings
            registry: RegistryService (known repositories, anchors)
            worktrees: WorktreeService (listing, removal)
            creation: CreationService (resolving and creating worktrees)
            prompter: Line prompts used while the surface is suspended
            surface: TerminalSurface providing session() and suspended()
            keys: KeyReader providing poll() and read_key()
            renderer: Render sink with draw(frame)
            clock: Time source, monotonic by default
            current_repo: Repository to highlight initially
        """
        self.config = config
        self.registry = registry
        self.worktrees = worktrees
        self.creation = creation
        self.prompter = prompter
        self.surface = surface
        self.keys = keys
        self.renderer = renderer
        self.clock = clock or MonotonicClock()
        self.current_repo = current_repo

        self.state = NavigatorState(
            repos=HotkeyList(RepoRecord.search_text, config.hotkey_pool),
            worktrees=HotkeyList(WorktreeEntry.search_text, config.hotkey_pool),
            chord=ChordBuffer(config.chord_timeout),
            status=STATUS_REPO_KEYS,
        )
        self.result: Optional[Selection] = None
        self.done = False

    # Loop

    def load_repositories(self) -> None:
        """Load the registry into the repository screen, highlighting the current repository."""
        self.state.repos.reset(self.registry.list_known_repositories())
        if self.current_repo is not None:
            repo_id = self.current_repo.repo_id
            self.state.repos.select_item(lambda record: record.repo_id == repo_id)

    def run(self) -> Optional[Selection]:
        """Run until the user selects a worktree (returned) or quits (None).

        Raises:
            ConfigIOError: the registry could not be read
            NoInteractiveSurfaceError: there is no terminal to draw on
        """
        self.load_repositories()
        with self.surface.session():
            while not self.done:
                self.tick()
                self.renderer.draw(self.build_frame())
                if not self.keys.poll(self.config.poll_interval):
                    continue
                event = self.keys.read_key()
                if event is None or not event.is_press:
                    continue
                self.handle_key(event)
        return self.result

    def tick(self) -> None:
        self.state.expire(self.clock.now(), self.config.double_tap_window)

    def quit(self) -> None:
        self.result = None
        self.done = True

    def handle_key(self, event: KeyEvent) -> None:
        """Apply one key press to the state."""
        if event.ctrl and event.code == "c":
            self.quit()
            return
        try:
            _DISPATCH[self.state.view](self, event)
        except NoSelectionError as e:
            logger.debug(f"Ignoring key {event.code}: {e}")
            self.state.status = STATUS_NOTHING_SELECTED

    # Frame

    def build_frame(self) -> Frame:
        st = self.state
        lst = st.current_list()
        visible = lst.visible()
        selected = lst.clamp(visible)
        codes = lst.codes(visible)

        rows = []
        for position, (index, code) in enumerate(zip(visible, codes)):
            item = lst.items[index]
            if st.screen is Screen.REPO_LIST:
                primary, secondary = item.repo_name, str(item.anchor_path)
            else:
                primary, secondary = item.branch_label, item.path
            rows.append(FrameRow(code=code, primary=primary, secondary=secondary, selected=position == selected))

        if st.screen is Screen.REPO_LIST:
            title = "gw"
            list_title = f"Repositories ({len(visible)}/{len(lst.items)})"
            help_text = HELP_REPO
        else:
            title = f"gw: {st.active_repo.repo_name}" if st.active_repo else "gw"
            list_title = f"Worktrees ({len(visible)}/{len(lst.items)})"
            help_text = HELP_WORKTREE

        full_redraw = st.needs_full_redraw
        st.needs_full_redraw = False
        return Frame(
            title=title,
            filter_text=lst.filter_text,
            filtering=st.mode is Mode.FILTER,
            chord=st.chord.text,
            list_title=list_title,
            rows=rows,
            selected=selected,
            footer=st.status,
            overlay=help_text if st.mode is Mode.HELP else None,
            full_redraw=full_redraw,
        )

    # Key handlers, one per view

    def _handle_navigation(self, event: KeyEvent) -> bool:
        """Keys shared by both screens in normal mode. Returns True when consumed."""
        st = self.state
        lst = st.current_list()
        code = event.code
        now = self.clock.now()

        if code != "g" or event.ctrl:
            st.pending_top = False
        if event.ctrl:
            return False

        if code in ("j", DOWN):
            lst.move(1)
            st.chord.clear()
        elif code in ("k", UP):
            lst.move(-1)
            st.chord.clear()
        elif code == "G":
            lst.select_last()
            st.chord.clear()
        elif code == "g":
            if st.pending_top and now - st.pending_top_at <= self.config.double_tap_window:
                lst.select_first()
                st.pending_top = False
            else:
                st.pending_top = True
                st.pending_top_at = now
            st.chord.clear()
        elif code == "/":
            lst.clear_filter()
            st.chord.clear()
            st.set_mode(Mode.FILTER)
            st.status = STATUS_FILTER
        elif code == "?":
            st.status_before_help = st.status
            st.set_mode(Mode.HELP)
            st.status = STATUS_HELP
        elif event.is_char and code in self.config.hotkey_pool:
            position = st.chord.feed(code, lst.codes(), now)
            if position is not None:
                lst.selected = position
        else:
            return False
        return True

    def _repo_normal(self, event: KeyEvent) -> None:
        if self._handle_navigation(event) or event.ctrl:
            return
        if event.code == ENTER:
            self._open_selected_repo()
        elif event.code in ("q", ESC):
            self.quit()
        elif event.code == "n":
            self._new_worktree(self.state.repos.selected_item())

    def _worktree_normal(self, event: KeyEvent) -> None:
        if self._handle_navigation(event):
            return
        if event.ctrl:
            if event.code == "d":
                self._ask_delete()
            return
        if event.code == ENTER:
            self._select_worktree()
        elif event.code == ESC:
            self._back_to_repos()
        elif event.code == "q":
            self.quit()
        elif event.code == "n":
            self._new_worktree(self.state.active_repo)

    def _filter(self, event: KeyEvent) -> None:
        st = self.state
        lst = st.current_list()
        if event.ctrl:
            self._normal_handler()(self, event)
        elif event.code == ENTER:
            st.set_mode(Mode.NORMAL)
            st.status = STATUS_FILTER_APPLIED
        elif event.code == ESC:
            st.set_mode(Mode.NORMAL)
            st.status = STATUS_FILTER_CANCELLED
        elif event.code == BACKSPACE:
            lst.pop_filter()
        elif event.is_char:
            lst.append_filter(event.code)
        else:
            self._normal_handler()(self, event)

    def _normal_handler(self) -> Callable[["Navigator", KeyEvent], None]:
        return _DISPATCH[View.of(self.state.screen, Mode.NORMAL)]

    def _confirm_delete(self, event: KeyEvent) -> None:
        if event.ctrl:
            return
        if event.code in ("y", "Y"):
            self._delete_pending()
        elif event.code in ("n", "N", ESC):
            self.state.pending_delete = None
            self.state.set_mode(Mode.NORMAL)
            self.state.status = STATUS_DELETE_CANCELLED

    def _help(self, event: KeyEvent) -> None:
        if event.ctrl or event.code not in ("?", ESC, "q"):
            return
        st = self.state
        st.set_mode(Mode.NORMAL)
        st.status = st.status_before_help if st.status_before_help is not None else self._default_status()
        st.status_before_help = None

    # Actions

    def _default_status(self) -> str:
        return STATUS_REPO_KEYS if self.state.screen is Screen.REPO_LIST else STATUS_WORKTREE_KEYS

    def _show_worktrees(self, record: RepoRecord) -> bool:
        """Load ``record``'s worktrees and switch to the worktree screen."""
        st = self.state
        try:
            listing = self.worktrees.list_worktrees(record)
        except NavigatorError as e:
            logger.error(f"Could not list worktrees for {record.repo_name}: {e}")
            st.status = f"listing failed: {e}"
            return False
        st.active_repo = record
        st.worktrees.reset(listing.entries)
        st.reset_chords()
        st.view = View.WORKTREE_NORMAL
        st.status = STATUS_WORKTREE_KEYS
        return True

    def _open_selected_repo(self) -> None:
        record = self.state.repos.selected_item()
        if record is None:
            raise NoSelectionError("repository")
        self._show_worktrees(record)

    def _back_to_repos(self) -> None:
        st = self.state
        st.reset_chords()
        st.view = View.REPO_NORMAL
        st.status = STATUS_REPO_KEYS

    def _select_worktree(self) -> None:
        st = self.state
        entry = st.worktrees.selected_item()
        if entry is None:
            raise NoSelectionError("worktree")
        path = Path(entry.path)
        if st.active_repo is not None:
            st.active_repo.anchor_path = path
            try:
                self.registry.persist_anchor(st.active_repo.repo_id, path)
            except ConfigIOError as e:
                logger.warning(f"Could not persist anchor {path}: {e}")
        self.result = Selection(repo_anchor=path, worktree_path=path)
        self.done = True

    def _ask_delete(self) -> None:
        st = self.state
        entry = st.worktrees.selected_item()
        if entry is None:
            raise NoSelectionError("worktree")
        st.pending_delete = Path(entry.path)
        st.set_mode(Mode.CONFIRM_DELETE)
        st.status = f"delete {entry.path} ? (y/n)"

    def _delete_pending(self) -> None:
        st = self.state
        target = st.pending_delete
        record = st.active_repo
        st.pending_delete = None
        st.set_mode(Mode.NORMAL)
        if target is None or record is None:
            return
        try:
            self.worktrees.remove_worktree(record.anchor_path, target, force=True)
        except NavigatorError as e:
            logger.error(f"Could not remove {target}: {e}")
            st.status = f"delete failed: {e}"
            return
        if self._show_worktrees(record):
            st.status = STATUS_REMOVED

    def _new_worktree(self, record: Optional[RepoRecord]) -> None:
        """Prompt for a branch or pull request and create a worktree for ``record``."""
        if record is None:
            raise NoSelectionError("repository")
        st = self.state
        created = None
        try:
            with self.surface.suspended():
                try:
                    created = self._prompt_and_create(record)
                except (NavigatorError, ValueError) as e:
                    logger.error(f"Creating a worktree for {record.repo_name} failed: {e}")
                    st.status = f"new worktree failed: {e}"
                except (KeyboardInterrupt, EOFError):
                    st.status = STATUS_NEW_CANCELLED
        finally:
            st.needs_full_redraw = True

        if created is None:
            return
        record.anchor_path = created
        if self._show_worktrees(record):
            st.worktrees.select_item(lambda entry: _same_path(entry.path, created))
            st.status = STATUS_CREATED

    def _prompt_and_create(self, record: RepoRecord) -> Optional[Path]:
        spec = self.prompter.read_line(PROMPT_SPEC, allow_empty=True)
        if not spec.strip():
            self.state.status = STATUS_NEW_CANCELLED
            return None

        # Listing repairs a stale anchor and tells us where the main worktree is
        listing = self.worktrees.list_worktrees(record)
        toplevel = Path(listing.entries[0].path) if listing.entries else record.anchor_path
        context = RepoContext(
            toplevel=toplevel,
            git_common_dir=record.git_common_dir,
            repo_name=record.repo_name,
        )

        plan = self.creation.resolver_for(context).resolve(spec)
        if plan.source.kind is SourceKind.NEW:
            base = self.prompter.read_line(PROMPT_BASE, allow_empty=True).strip()
            if base:
                plan = dataclasses.replace(plan, base=base)
        return self.creation.create_worktree(plan)


def _same_path(a, b) -> bool:
    return os.path.realpath(str(a)) == os.path.realpath(str(b))


_DISPATCH: Dict[View, Callable[[Navigator, KeyEvent], None]] = {
    View.REPO_NORMAL: Navigator._repo_normal,
    View.REPO_FILTER: Navigator._filter,
    View.REPO_HELP: Navigator._help,
    View.WORKTREE_NORMAL: Navigator._worktree_normal,
    View.WORKTREE_FILTER: Navigator._filter,
    View.WORKTREE_CONFIRM_DELETE: Navigator._confirm_delete,
    View.WORKTREE_HELP: Navigator._help,
}

_unhandled = set(View) - set(_DISPATCH)
if _unhandled:
    raise RuntimeError(f"navigator views without a key handler: {sorted(v.name for v in _unhandled)}")
