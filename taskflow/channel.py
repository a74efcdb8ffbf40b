"""A closable channel with optional bounds, item timeouts and throttling.

Values are fed in with :meth:`Channel.put` and read back with
:meth:`Channel.get` or by iterating over the channel.  A background thread
moves buffered values to readers one at a time, dropping values whose
timeout has passed and honouring producer and consumer throttles.
"""

from __future__ import annotations

import threading
import time
import weakref
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

DEFAULT_THROTTLE_WINDOW = 0.1
DEFAULT_MIN_SIZE = 1

# A throttle receives a view of the channel offering ``stats()`` and ``len()``
# and returns True while the producer or consumer should wait.
Throttle = Callable[[Any], bool]
Option = Callable[["_Core"], None]


@dataclass(frozen=True)
class _Item:
    value: Any
    deadline: Optional[float] = None

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() > self.deadline


def with_size(size: int) -> Option:
    """Bound the buffer to ``size`` items; ignored in non-blocking mode or below 1."""

    def apply(core: _Core) -> None:
        if size >= DEFAULT_MIN_SIZE and not core.nonblock:
            core.size = size

    return apply


def with_nonblock() -> Option:
    """Never block the producer; the buffer grows without bound."""

    def apply(core: _Core) -> None:
        core.nonblock = True

    return apply


def with_timeout(timeout: float) -> Option:
    """Drop items not handed to a reader within ``timeout`` seconds."""

    def apply(core: _Core) -> None:
        core.timeout = timeout

    return apply


def with_timeout_callback(callback: Callable[[Any], None]) -> Option:
    """Call ``callback`` with each value dropped because it timed out."""

    def apply(core: _Core) -> None:
        core.timeout_callback = callback

    return apply


def _chain(previous: Optional[Throttle], new: Optional[Throttle]) -> Optional[Throttle]:
    if previous is None:
        return new
    if new is None:
        return previous

    def chained(channel: Any) -> bool:
        return previous(channel) and new(channel)

    return chained


def with_throttle(
    producer_throttle: Optional[Throttle], consumer_throttle: Optional[Throttle]
) -> Option:
    """Add producer and consumer throttles, combined with any set before."""

    def apply(core: _Core) -> None:
        core.producer_throttle = _chain(core.producer_throttle, producer_throttle)
        core.consumer_throttle = _chain(core.consumer_throttle, consumer_throttle)

    return apply


def with_throttle_window(window: float) -> Option:
    """Set how often, in seconds, an active throttle is checked again."""

    def apply(core: _Core) -> None:
        core.throttle_window = window

    return apply


def _rate_limiter(rate: int, pick: Callable[[tuple[int, int]], int]) -> Throttle:
    begin = 0
    stamp: Optional[int] = None

    def check(channel: Any) -> bool:
        nonlocal begin, stamp
        now = int(time.time())
        count = pick(channel.stats())
        if stamp != now:
            begin = count
            stamp = now
            return False
        return rate > 0 and count - begin > rate

    return check


def with_rate_throttle(produce_rate: int, consume_rate: int) -> Option:
    """Limit items produced and consumed per second; 0 means unlimited."""
    return with_throttle(
        _rate_limiter(produce_rate, lambda stats: stats[0]),
        _rate_limiter(consume_rate, lambda stats: stats[1]),
    )


class _Core:
    """Shared state of a channel, driven by the consumer thread."""

    def __init__(self) -> None:
        self.size = DEFAULT_MIN_SIZE
        self.nonblock = False
        self.timeout = 0.0
        self.timeout_callback: Optional[Callable[[Any], None]] = None
        self.producer_throttle: Optional[Throttle] = None
        self.consumer_throttle: Optional[Throttle] = None
        self.throttle_window = DEFAULT_THROTTLE_WINDOW

        self._produced = 0
        self._consumed = 0
        self._counter_lock = threading.Lock()

        self._buffer: deque[_Item] = deque()
        self._buffer_cond = threading.Condition()
        self._closed = threading.Event()

        self._slot_cond = threading.Condition()
        self._slot: Any = None
        self._slot_full = False
        self._output_closed = False

    def stats(self) -> tuple[int, int]:
        with self._counter_lock:
            return self._produced, self._consumed

    def __len__(self) -> int:
        produced, consumed = self.stats()
        return produced - consumed

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        with self._buffer_cond:
            if self._closed.is_set():
                return
            self._closed.set()
            self._buffer_cond.notify_all()

    def _throttled(self, throttle: Optional[Throttle]) -> bool:
        """Wait while ``throttle`` holds; return True if the channel closed."""
        if throttle is None or not throttle(self):
            return False
        throttled, closed = True, self.closed
        while throttled and not closed:
            self._closed.wait(self.throttle_window)
            throttled, closed = throttle(self), self.closed
        return closed

    def put(self, value: Any) -> None:
        if self.closed:
            return
        deadline = time.monotonic() + self.timeout if self.timeout > 0 else None
        item = _Item(value, deadline)
        if not self.nonblock and self._throttled(self.producer_throttle):
            return
        with self._buffer_cond:
            if not self.nonblock:
                while len(self._buffer) >= self.size:
                    self._buffer_cond.wait()
                    if self.closed:
                        return
            self._buffer.append(item)
            with self._counter_lock:
                self._produced += 1
            self._buffer_cond.notify_all()

    def _count_consumed(self) -> None:
        with self._counter_lock:
            self._consumed += 1

    def _close_output(self) -> None:
        with self._slot_cond:
            self._output_closed = True
            self._slot_cond.notify_all()

    def _hand_off(self, value: Any) -> None:
        with self._slot_cond:
            self._slot = value
            self._slot_full = True
            self._slot_cond.notify_all()
            while self._slot_full:
                self._slot_cond.wait()

    def consume(self) -> None:
        while True:
            if self._throttled(self.consumer_throttle):
                self._close_output()
                return
            with self._buffer_cond:
                while not self._buffer:
                    if self.closed:
                        self._close_output()
                        return
                    self._buffer_cond.wait()
                item = self._buffer.popleft()
                self._buffer_cond.notify_all()
            if item.expired():
                if self.timeout_callback is not None:
                    self.timeout_callback(item.value)
                self._count_consumed()
                continue
            self._hand_off(item.value)
            self._count_consumed()

    def receive(self, timeout: Optional[float]) -> tuple[Any, bool]:
        with self._slot_cond:
            ready = self._slot_cond.wait_for(
                lambda: self._slot_full or self._output_closed, timeout
            )
            if not ready:
                raise TimeoutError("no value available from channel")
            if self._slot_full:
                value = self._slot
                self._slot = None
                self._slot_full = False
                self._slot_cond.notify_all()
                return value, True
            return None, False


class Channel:
    """A thread-safe channel configured by option functions.

    ``Channel(*args)`` takes options such as :func:`with_size` or
    :func:`with_timeout`.  The channel closes itself when it is garbage
    collected, if it was not closed before.
    """

    def __init__(self, *args: Option) -> None:
        core = _Core()
        for option in args:
            option(core)
        self._core = core
        self._thread = threading.Thread(
            target=core.consume, name="channel-consumer", daemon=True
        )
        self._thread.start()
        self._finalizer = weakref.finalize(self, core.close)

    def put(self, value: Any) -> None:
        """Send ``value``; a no-op once the channel is closed."""
        self._core.put(value)

    def get(self, timeout: Optional[float] = None) -> Any:
        """Receive the next value.

        Returns None once the channel is closed and drained, and raises
        TimeoutError if nothing arrives within ``timeout`` seconds.
        """
        value, _ = self._core.receive(timeout)
        return value

    def __iter__(self) -> Iterator[Any]:
        while True:
            value, ok = self._core.receive(None)
            if not ok:
                return
            yield value

    def __len__(self) -> int:
        return len(self._core)

    def stats(self) -> tuple[int, int]:
        """Return the counts of produced and consumed items."""
        return self._core.stats()

    def close(self) -> None:
        """Close the channel; buffered values are still delivered."""
        self._core.close()

    def __enter__(self) -> Channel:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()