from __future__ import annotations

import logging
from typing import Protocol

from ..models import ViewModel
from .dispatcher import AppState, Dispatcher
from .multiplexer import EventChannel

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, view: ViewModel) -> None:
        """Draw one frame."""


def run_event_loop(
    channel: EventChannel,
    dispatcher: Dispatcher,
    renderer: Renderer,
    state: AppState | None = None,
) -> AppState:
    """Dispatch events until quit and render a fresh view model after each one.

    `channel.recv()` is the only blocking point. `ChannelClosed` propagates: no more
    events can arrive, so the loop cannot continue.
    """

    app_state = state if state is not None else AppState()
    renderer.render(dispatcher.view_model(app_state))
    while True:
        event = channel.recv()
        if not dispatcher.handle(app_state, event):
            logger.debug("event loop finished")
            return app_state
        renderer.render(dispatcher.view_model(app_state))
