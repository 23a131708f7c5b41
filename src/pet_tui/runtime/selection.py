from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..models import Pet


class NoSelectionError(LookupError):
    """Raised when the current pet is requested but nothing is selected."""


@dataclass(slots=True)
class Selection:
    """Cursor over a list the selection does not own.

    Every call takes the current collection length because the collection can change
    between calls. With a non-empty collection the cursor is always in bounds; with an
    empty one it is None.
    """

    selected: int | None = None

    def sync(self, length: int) -> None:
        if length <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        elif self.selected >= length:
            self.selected = length - 1

    def select_next(self, length: int) -> None:
        if self.selected is None:
            return
        if length <= 0:
            self.selected = None
            return
        if self.selected >= length - 1:
            self.selected = 0
        else:
            self.selected += 1

    def select_prev(self, length: int) -> None:
        if self.selected is None:
            return
        if length <= 0:
            self.selected = None
            return
        if self.selected == 0:
            self.selected = length - 1
        else:
            # min() covers a collection that shrank behind our back.
            self.selected = min(self.selected, length) - 1

    def on_append(self, length: int) -> None:
        if self.selected is None and length > 0:
            self.selected = 0

    def on_remove(self, removed_index: int, length: int) -> None:
        """Move the cursor after `removed_index` was removed; `length` is the new size."""

        if length <= 0:
            self.selected = None
            return
        self.selected = min(max(removed_index - 1, 0), length - 1)

    def position(self, length: int) -> int:
        """Return the selected index, checked against a collection of `length` pets."""

        if self.selected is None:
            raise NoSelectionError("No pet selected")
        if not (0 <= self.selected < length):
            raise NoSelectionError(
                f"Selection {self.selected} is outside a collection of {length} pets"
            )
        return self.selected

    def current(self, pets: Sequence[Pet]) -> Pet:
        return pets[self.position(len(pets))]
