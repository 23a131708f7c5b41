from __future__ import annotations

from time import monotonic
from typing import TYPE_CHECKING

from ..runtime.dispatcher import AppState, Dispatcher
from ..runtime.events import InputEvent, Keystroke, Tick
from ..store.base import StoreError
from .render import build_view

if TYPE_CHECKING:
    from textual.app import App


def build_textual_app(
    dispatcher: Dispatcher,
    state: AppState,
    *,
    tick_interval_s: float,
) -> App[StoreError | None]:
    """Build a Textual front-end that drives `dispatcher` directly.

    Textual owns the terminal here, so its key events and `set_interval` timer stand in
    for the event multiplexer. Frames are the same renderables the Rich renderer draws.
    A `StoreError` that escapes the dispatcher (fail-fast mode) ends the app and becomes
    its return value.
    """

    from textual.app import App, ComposeResult
    from textual.events import Key
    from textual.widgets import Static

    class _PetApp(App[StoreError | None]):
        CSS = """
        Screen {
            background: #2e3436;
            color: #eeeeec;
        }
        #view {
            height: 1fr;
        }
        """

        def compose(self) -> ComposeResult:
            yield Static("", id="view")

        def on_mount(self) -> None:
            try:
                self._refresh_view()
            except StoreError as exc:
                self.exit(exc)
                return
            self.set_interval(tick_interval_s, self._on_tick)

        def _refresh_view(self) -> None:
            self.query_one("#view", Static).update(build_view(dispatcher.view_model(state)))

        def _dispatch(self, event: InputEvent) -> None:
            try:
                if not dispatcher.handle(state, event):
                    self.exit(None)
                    return
                self._refresh_view()
            except StoreError as exc:
                self.exit(exc)

        def on_key(self, event: Key) -> None:
            event.stop()
            self._dispatch(Keystroke(event.key, at=monotonic()))

        def _on_tick(self) -> None:
            self._dispatch(Tick(at=monotonic()))

    return _PetApp()


def run_textual(dispatcher: Dispatcher, state: AppState, *, tick_interval_s: float) -> None:
    failure = build_textual_app(dispatcher, state, tick_interval_s=tick_interval_s).run()
    if failure is not None:
        raise failure
