"""Tests for key decoding, frame rendering, prompts and the terminal surface"""
import io
import os
import pty
import select
import termios

import pytest
from rich.console import Console

from git_worktree_navigator.navigator.events import DOWN, ENTER, ESC, UP, BACKSPACE, KeyEvent
from git_worktree_navigator.navigator.frame import Frame, FrameRow
from git_worktree_navigator.ui.input import KeyReader
from git_worktree_navigator.ui.prompts import RichPrompter
from git_worktree_navigator.ui.render import RichRenderer, visible_window
from git_worktree_navigator.ui.terminal import ENTER_SEQUENCE, LEAVE_SEQUENCE, TerminalSurface


@pytest.fixture
def pipe_reader():
    read_fd, write_fd = os.pipe()
    yield KeyReader(read_fd), write_fd
    os.close(read_fd)
    os.close(write_fd)


def _read_all(reader, count):
    return [reader.read_key() for _ in range(count)]


class TestKeyReader:
    """Test raw byte decoding."""

    def test_plain_and_control_keys(self, pipe_reader):
        reader, write_fd = pipe_reader
        os.write(write_fd, b"j\r\x7f\x04\x03")
        assert _read_all(reader, 5) == [
            KeyEvent.char("j"),
            KeyEvent(ENTER),
            KeyEvent(BACKSPACE),
            KeyEvent.with_ctrl("d"),
            KeyEvent.with_ctrl("c"),
        ]

    def test_arrows(self, pipe_reader):
        reader, write_fd = pipe_reader
        os.write(write_fd, b"\x1b[A\x1b[B")
        assert _read_all(reader, 2) == [KeyEvent(UP), KeyEvent(DOWN)]

    def test_lone_escape(self, pipe_reader):
        reader, write_fd = pipe_reader
        os.write(write_fd, b"\x1b")
        assert reader.read_key() == KeyEvent(ESC)

    def test_escape_then_key(self, pipe_reader):
        reader, write_fd = pipe_reader
        os.write(write_fd, b"\x1bq")
        assert reader.read_key() == KeyEvent(ESC)
        assert reader.poll(0) is True
        assert reader.read_key() == KeyEvent.char("q")

    def test_utf8(self, pipe_reader):
        reader, write_fd = pipe_reader
        os.write(write_fd, "é".encode("utf-8"))
        assert reader.read_key() == KeyEvent.char("é")

    def test_poll_timeout(self, pipe_reader):
        reader, _ = pipe_reader
        assert reader.poll(0.01) is False


def _frame(**overrides):
    values = dict(
        title="gw",
        filter_text="",
        filtering=False,
        chord="",
        list_title="Repositories (2/2)",
        rows=[
            FrameRow("a", "alpha", "/src/alpha", selected=True),
            FrameRow("s", "beta", "/src/beta"),
        ],
        selected=0,
        footer="j/k move",
    )
    values.update(overrides)
    return Frame(**values)


@pytest.fixture
def renderer():
    stream = io.StringIO()
    console = Console(file=stream, force_terminal=True, width=80, height=24, color_system=None)
    return RichRenderer(stream, console=console), stream


class TestRichRenderer:
    """Test drawing frames."""

    def test_draws_rows_in_place(self, renderer):
        sink, stream = renderer
        sink.draw(_frame())
        output = stream.getvalue()

        assert output.startswith("\x1b[H")
        assert "alpha" in output and "/src/beta" in output
        assert "j/k move" in output
        assert "\r\n" in output

    def test_identical_frame_not_redrawn(self, renderer):
        sink, stream = renderer
        sink.draw(_frame())
        length = len(stream.getvalue())
        sink.draw(_frame())
        assert len(stream.getvalue()) == length

    def test_full_redraw_clears_screen(self, renderer):
        sink, stream = renderer
        sink.draw(_frame(full_redraw=True))
        assert stream.getvalue().startswith("\x1b[2J")

    def test_overlay_replaces_list(self, renderer):
        sink, stream = renderer
        sink.draw(_frame(overlay="Repo Picker help"))
        output = stream.getvalue()
        assert "Repo Picker help" in output
        assert "/src/beta" not in output

    def test_filter_and_chord_in_header(self, renderer):
        sink, stream = renderer
        sink.draw(_frame(filter_text="alp", filtering=True, chord="a"))
        output = stream.getvalue()
        assert "/alp" in output
        assert "[a]" in output


class TestVisibleWindow:
    """Test scrolling around the selection."""

    def test_everything_fits(self):
        assert visible_window(5, 4, 10) == range(5)

    def test_centered(self):
        assert visible_window(100, 50, 10) == range(45, 55)

    def test_clamped_at_ends(self):
        assert visible_window(100, 0, 10) == range(0, 10)
        assert visible_window(100, 99, 10) == range(90, 100)


def _canonical(fd):
    return bool(termios.tcgetattr(fd)[3] & termios.ICANON)


def _drain(fd):
    chunks = []
    while select.select([fd], [], [], 0)[0]:
        chunks.append(os.read(fd, 1024))
    return b"".join(chunks)


@pytest.fixture
def pty_surface():
    """A surface reading from a pseudo-terminal and writing to a pipe."""
    master, slave = pty.openpty()
    out_read, out_write = os.pipe()
    yield TerminalSurface(slave, out_write), slave, out_read
    for fd in (master, slave, out_read, out_write):
        os.close(fd)


class TestTerminalSurface:
    """Test raw mode and alternate screen switching on a real pseudo-terminal."""

    def test_session_restores_terminal_when_body_raises(self, pty_surface):
        surface, slave, out = pty_surface
        saved = termios.tcgetattr(slave)

        with pytest.raises(RuntimeError):
            with surface.session():
                assert not _canonical(slave)
                raise RuntimeError("boom")

        assert termios.tcgetattr(slave) == saved
        assert surface.active is False
        assert _drain(out) == ENTER_SEQUENCE + LEAVE_SEQUENCE

    def test_suspended_cooks_then_resumes_raw_when_body_raises(self, pty_surface):
        surface, slave, out = pty_surface

        with surface.session():
            with pytest.raises(KeyboardInterrupt):
                with surface.suspended():
                    assert _canonical(slave)
                    assert surface.active is False
                    raise KeyboardInterrupt
            assert not _canonical(slave)
            assert surface.active is True
        assert _canonical(slave)

        assert _drain(out) == (ENTER_SEQUENCE + LEAVE_SEQUENCE) * 2

    def test_suspended_outside_session_changes_nothing(self, pty_surface):
        surface, slave, out = pty_surface
        saved = termios.tcgetattr(slave)
        with surface.suspended():
            pass
        assert termios.tcgetattr(slave) == saved
        assert _drain(out) == b""

    def test_prompt_stream_reads_owned_terminal(self):
        master, slave = pty.openpty()
        try:
            owned = TerminalSurface(os.dup(slave), slave, owns_input=True)
            stream = owned.prompt_stream()
            os.write(master, b"feature\n")
            assert stream.readline() == "feature\n"
            stream.close()
            owned.close()
            assert TerminalSurface(slave, slave).prompt_stream() is None
        finally:
            os.close(master)
            os.close(slave)


class TestRichPrompter:
    """Test that prompts read from the given stream."""

    def test_reads_from_stream(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        prompter = RichPrompter(console, stream=io.StringIO("feature/x\n2\ny\n"))
        assert prompter.read_line("Branch") == "feature/x"
        assert prompter.choose("Remote", ["origin", "upstream"]) == 1
        assert prompter.confirm("Remove?") is True
