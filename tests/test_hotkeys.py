"""Tests for mnemonic code assignment and chord resolution"""
from git_worktree_navigator.constants import DEFAULT_HOTKEY_POOL
from git_worktree_navigator.navigator.hotkeys import ChordBuffer, assign_hotkeys, code_map


class TestAssignHotkeys:
    """Test code assignment."""

    def test_single_symbols_in_pool_order(self):
        assert assign_hotkeys(3, "asd") == ["a", "s", "d"]

    def test_overflow_is_row_major(self):
        assert assign_hotkeys(7, "asd") == ["a", "s", "d", "aa", "as", "ad", "sa"]

    def test_codes_unique_up_to_capacity(self):
        k = len(DEFAULT_HOTKEY_POOL)
        codes = assign_hotkeys(k + k * k, DEFAULT_HOTKEY_POOL)
        assert len(set(codes)) == len(codes)
        assert all(1 <= len(code) <= 2 for code in codes)

    def test_codes_repeat_beyond_capacity(self):
        """Past K + K^2 items the two-symbol codes wrap around."""
        codes = assign_hotkeys(3 + 9 + 1, "asd")
        assert codes[-1] == "aa"
        assert codes.count("aa") == 2

    def test_empty_pool(self):
        assert assign_hotkeys(5, "") == []

    def test_zero_items(self):
        assert assign_hotkeys(0, "asd") == []

    def test_code_map_keeps_last_position(self):
        assert code_map(["a", "s", "a"]) == {"a": 2, "s": 1}


class TestChordBuffer:
    """Test chord resolution."""

    CODES = ["a", "s", "d", "aa", "as"]

    def test_single_key_selects_and_is_kept(self):
        buffer = ChordBuffer(timeout=1.5)
        assert buffer.feed("s", self.CODES, now=0.0) == 1
        assert buffer.text == "s"

    def test_two_key_code_selects_and_clears(self):
        buffer = ChordBuffer(timeout=1.5)
        assert buffer.feed("a", self.CODES, now=0.0) == 0
        assert buffer.feed("s", self.CODES, now=0.1) == 4
        assert buffer.text == ""

    def test_no_prefix_clears(self):
        buffer = ChordBuffer(timeout=1.5)
        assert buffer.feed("x", self.CODES, now=0.0) is None
        assert buffer.text == ""

    def test_prefix_without_match_is_kept(self):
        buffer = ChordBuffer(timeout=1.5)
        assert buffer.feed("a", ["as", "ad"], now=0.0) is None
        assert buffer.text == "a"

    def test_unknown_second_key_clears(self):
        buffer = ChordBuffer(timeout=1.5)
        buffer.feed("a", ["as", "ad"], now=0.0)
        assert buffer.feed("f", ["as", "ad"], now=0.1) is None
        assert buffer.text == ""

    def test_full_buffer_is_cleared_before_feeding(self):
        buffer = ChordBuffer(timeout=1.5)
        buffer.text = "zz"
        assert buffer.feed("d", self.CODES, now=0.0) == 2

    def test_expiry(self):
        buffer = ChordBuffer(timeout=1.5)
        buffer.feed("a", ["as"], now=10.0)
        assert buffer.expire(11.0) is False
        assert buffer.text == "a"
        assert buffer.expire(11.6) is True
        assert not buffer
