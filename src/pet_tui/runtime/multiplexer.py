from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Callable
from queue import Empty, Full, Queue
from time import monotonic
from typing import Final, Protocol

from .events import InputEvent, Keystroke, Tick

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_S: Final[float] = 0.2
_CHANNEL_POLL_S: Final[float] = 0.05
_CLOSED: Final = object()


class ChannelClosed(Exception):
    """Raised when the event channel has been closed by either side."""


class InputSource(Protocol):
    """Raw key input used by the multiplexer."""

    def read_key(self, timeout: float) -> str | None:
        """Block up to `timeout` seconds for one key; return None when none arrived."""


class EventChannel:
    """Bounded, ordered single-producer/single-consumer hand-off.

    `close()` may be called from either side. Pending events are still delivered to
    the consumer before it observes `ChannelClosed`; a producer observes it at once.
    """

    def __init__(self, maxsize: int = 64) -> None:
        self._queue: Queue[object] = Queue(maxsize=maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        # Wake a consumer blocked in get(); a full queue is drained before the flag matters.
        with contextlib.suppress(Full):
            self._queue.put_nowait(_CLOSED)

    def send(self, event: InputEvent) -> None:
        while True:
            if self._closed.is_set():
                raise ChannelClosed("Event channel is closed")
            try:
                self._queue.put(event, timeout=_CHANNEL_POLL_S)
            except Full:
                continue
            return

    def recv(self) -> InputEvent:
        while True:
            try:
                item = self._queue.get(timeout=_CHANNEL_POLL_S)
            except Empty:
                if self._closed.is_set():
                    raise ChannelClosed("Event channel is closed") from None
                continue
            if item is _CLOSED:
                raise ChannelClosed("Event channel is closed")
            return item  # type: ignore[return-value]

    def drain(self) -> list[InputEvent]:
        """Return every queued event without blocking."""

        events: list[InputEvent] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except Empty:
                return events
            if item is not _CLOSED:
                events.append(item)  # type: ignore[arg-type]


class EventMultiplexer:
    """Merge keystrokes and periodic ticks into one ordered event stream.

    Each cycle waits for a key until the next tick is due. A key is forwarded at once
    without touching the tick clock; a tick is sent (and the clock reset) only once a
    full interval has elapsed since the previous tick.
    """

    def __init__(
        self,
        source: InputSource,
        channel: EventChannel,
        *,
        tick_interval_s: float = DEFAULT_TICK_INTERVAL_S,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        if tick_interval_s <= 0:
            raise ValueError(f"tick interval must be positive, got {tick_interval_s!r}")
        self._source = source
        self._channel = channel
        self._tick_interval_s = tick_interval_s
        self._clock = clock
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.failure: BaseException | None = None

    @property
    def tick_interval_s(self) -> float:
        return self._tick_interval_s

    def run(self) -> None:
        """Run the loop in the calling thread until stopped or the channel closes."""

        last_tick = self._clock()
        try:
            while not self._stop.is_set():
                timeout = max(0.0, self._tick_interval_s - (self._clock() - last_tick))
                key = self._source.read_key(timeout)
                if key is not None:
                    logger.debug("key %r", key)
                    self._channel.send(Keystroke(key, at=self._clock()))
                now = self._clock()
                if now - last_tick >= self._tick_interval_s:
                    self._channel.send(Tick(at=now))
                    last_tick = now
        except ChannelClosed:
            logger.debug("Event channel closed; multiplexer exiting")
        except Exception as exc:
            logger.exception("Input source failed; multiplexer exiting")
            self.failure = exc
        finally:
            self._channel.close()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Multiplexer already started")
        self._thread = threading.Thread(target=self.run, name="pet-tui-events", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
