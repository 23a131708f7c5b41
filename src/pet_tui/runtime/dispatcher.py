from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..models import Pet, ViewMode, ViewModel
from ..store.base import PetStoreInterface, StoreError
from .events import InputEvent, Keystroke
from .selection import NoSelectionError, Selection

logger = logging.getLogger(__name__)

KEY_QUIT = "q"
KEY_HOME = "h"
KEY_PETS = "p"
KEY_ADD = "a"
KEY_DELETE = "d"
KEY_DOWN = "down"
KEY_UP = "up"


@dataclass(slots=True)
class AppState:
    """All mutable UI state. Owned by the run loop and lent to the dispatcher."""

    mode: ViewMode = "home"
    selection: Selection = field(default_factory=Selection)
    pets: list[Pet] = field(default_factory=list)
    status: str = ""
    error: str | None = None


class Dispatcher:
    """Translate input events into store and selection changes.

    With `fail_fast` a `StoreError` propagates to the caller; otherwise it is logged,
    recorded in `AppState.error` and the last good snapshot stays on screen.
    """

    def __init__(self, store: PetStoreInterface, *, fail_fast: bool = False) -> None:
        self._store = store
        self._fail_fast = fail_fast
        self._commands: dict[str, Callable[[AppState], None]] = {
            KEY_HOME: self._go_home,
            KEY_PETS: self._go_pets,
            KEY_ADD: self._add,
            KEY_DELETE: self._delete,
            KEY_DOWN: self._down,
            KEY_UP: self._up,
        }

    def handle(self, state: AppState, event: InputEvent) -> bool:
        """Apply one event; return False when the application should quit."""

        if not isinstance(event, Keystroke):
            return True
        if event.key == KEY_QUIT:
            logger.debug("quit requested")
            return False
        command = self._commands.get(event.key)
        if command is None:
            return True
        state.status = ""
        try:
            command(state)
        except StoreError as exc:
            if self._fail_fast:
                raise
            logger.warning("Command %r failed: %s", event.key, exc)
            state.error = str(exc)
        else:
            state.error = None
        return True

    def view_model(self, state: AppState) -> ViewModel:
        self._reload(state)
        return ViewModel(
            mode=state.mode,
            pets=tuple(state.pets),
            selected=state.selection.selected,
            status=state.status,
            error=state.error,
        )

    def _reload(self, state: AppState) -> None:
        try:
            pets = self._store.load()
        except StoreError as exc:
            if self._fail_fast:
                raise
            if state.error != str(exc):
                logger.warning("Reload failed: %s", exc)
            state.error = str(exc)
            return
        state.pets = pets
        state.selection.sync(len(pets))

    def _go_home(self, state: AppState) -> None:
        state.mode = "home"

    def _go_pets(self, state: AppState) -> None:
        state.mode = "pets"

    def _add(self, state: AppState) -> None:
        pets = self._store.append_random()
        state.pets = pets
        state.selection.on_append(len(pets))
        added = pets[-1]
        state.status = f"Added {added.name} ({added.category}, {added.age})"
        logger.debug("added pet id=%d name=%s", added.id, added.name)

    def _delete(self, state: AppState) -> None:
        state.pets = self._store.load()
        state.selection.sync(len(state.pets))
        try:
            index = state.selection.position(len(state.pets))
        except NoSelectionError:
            state.status = "No pet selected"
            return
        target = state.pets[index]
        pets = self._store.remove_at(index)
        state.pets = pets
        state.selection.on_remove(index, len(pets))
        state.status = f"Deleted {target.name}"
        logger.debug("removed pet at index %d", index)

    def _down(self, state: AppState) -> None:
        state.selection.select_next(len(self._store.load()))

    def _up(self, state: AppState) -> None:
        state.selection.select_prev(len(self._store.load()))
