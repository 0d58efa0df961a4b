"""
Cursor-addressed list used for the device menu.
"""

from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class SelectableList(Generic[T]):
    """
    An ordered collection with an optional cursor.

    Navigation wraps around at both ends, so the cursor is always a valid
    index while the list is non-empty.
    """

    def __init__(self, items: Sequence[T]):
        self.items: List[T] = list(items)
        self._cursor: Optional[int] = None

    @classmethod
    def with_items(cls, items: Sequence[T]) -> "SelectableList[T]":
        """Create a list with nothing selected."""
        return cls(items)

    def __len__(self) -> int:
        return len(self.items)

    def selected(self) -> Optional[int]:
        """Index of the current selection, or None."""
        return self._cursor

    def current(self) -> Optional[T]:
        """Item under the cursor, or None."""
        if self._cursor is None:
            return None
        return self.items[self._cursor]

    def select_first(self):
        if self.items:
            self._cursor = 0

    def next(self):
        """Move the cursor forward, wrapping to the first item."""
        if not self.items:
            return
        if self._cursor is None:
            self._cursor = 0
        else:
            self._cursor = (self._cursor + 1) % len(self.items)

    def previous(self):
        """Move the cursor backward, wrapping to the last item."""
        if not self.items:
            return
        if self._cursor is None:
            self._cursor = 0
        else:
            self._cursor = (self._cursor - 1) % len(self.items)
