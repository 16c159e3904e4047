"""Filterable, hotkeyed list shared by the repository and worktree screens."""

from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from git_worktree_navigator.navigator.hotkeys import assign_hotkeys

T = TypeVar("T")


def project(items: Sequence[T], filter_text: str, search_text: Callable[[T], str]) -> List[int]:
    """Return indices of items whose search text contains ``filter_text``.

    Matching is a case-insensitive substring test; an empty filter keeps every
    item. Original order is preserved.
    """
    needle = filter_text.lower()
    if not needle:
        return list(range(len(items)))
    return [i for i, item in enumerate(items) if needle in search_text(item).lower()]


class HotkeyList(Generic[T]):
    """Items plus per-screen filter text and selection.

    ``selected`` is a position in the visible projection, not in ``items``.
    """

    def __init__(self, search_text: Callable[[T], str], pool: Sequence[str]):
        self.search_text = search_text
        self.pool = pool
        self.items: List[T] = []
        self.filter_text = ""
        self.selected = 0

    def set_items(self, items: Sequence[T]) -> None:
        self.items = list(items)
        self.clamp()

    def reset(self, items: Optional[Sequence[T]] = None) -> None:
        """Clear filter and selection, optionally replacing the items."""
        if items is not None:
            self.items = list(items)
        self.filter_text = ""
        self.selected = 0

    def visible(self) -> List[int]:
        return project(self.items, self.filter_text, self.search_text)

    def codes(self, visible: Optional[Sequence[int]] = None) -> List[str]:
        if visible is None:
            visible = self.visible()
        return assign_hotkeys(len(visible), self.pool)

    def clamp(self, visible: Optional[Sequence[int]] = None) -> int:
        if visible is None:
            visible = self.visible()
        self.selected = max(0, min(self.selected, len(visible) - 1))
        return self.selected

    def move(self, delta: int) -> None:
        self.selected = max(0, self.selected + delta)
        self.clamp()

    def select_first(self) -> None:
        self.selected = 0

    def select_last(self) -> None:
        self.selected = max(0, len(self.visible()) - 1)

    def select_item(self, predicate: Callable[[T], bool]) -> bool:
        """Select the first visible item matching ``predicate``."""
        for position, index in enumerate(self.visible()):
            if predicate(self.items[index]):
                self.selected = position
                return True
        return False

    def selected_item(self) -> Optional[T]:
        visible = self.visible()
        if not visible:
            return None
        return self.items[visible[self.clamp(visible)]]

    def append_filter(self, ch: str) -> None:
        self.filter_text += ch
        self.clamp()

    def pop_filter(self) -> None:
        self.filter_text = self.filter_text[:-1]
        self.clamp()

    def clear_filter(self) -> None:
        self.filter_text = ""
        self.clamp()
