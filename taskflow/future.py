"""Futures holding the value or error of work run on another thread."""

from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Future(Generic[T]):
    """The eventual value or error of an asynchronous task."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._error: Optional[BaseException] = None

    def set_result(
        self, value: Optional[T] = None, error: Optional[BaseException] = None
    ) -> None:
        """Complete the future; it may be completed only once."""
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("future already completed")
            self._value = value
            self._error = error
            self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until done or ``timeout`` seconds pass; return whether done."""
        return self._event.wait(timeout)

    def result(self) -> Optional[T]:
        """Wait, then return the value or raise the task's error."""
        self._event.wait()
        if self._error is not None:
            raise self._error
        return self._value

    def value(self) -> Optional[T]:
        """Wait, then return the value, None if the task failed."""
        self._event.wait()
        return self._value

    def error(self) -> Optional[BaseException]:
        """Wait, then return the task's error, or None."""
        self._event.wait()
        return self._error

    def ok(self) -> bool:
        """Wait, then report whether the task finished without error."""
        self._event.wait()
        return self._error is None

    def done(self) -> bool:
        """Report, without waiting, whether the task has finished."""
        return self._event.is_set()


def spawn(fn: Callable[[], T]) -> Future[T]:
    """Run ``fn`` on a new thread; its return value or exception fills the future."""
    future: Future[T] = Future()

    def run() -> None:
        try:
            value = fn()
        except Exception as exc:  # the error travels in the future
            future.set_result(None, exc)
        else:
            future.set_result(value, None)

    threading.Thread(target=run, daemon=True).start()
    return future


def await_all(*args: Future) -> Optional[BaseException]:
    """Wait in order and return the first error met, without waiting for the rest."""
    for future in args:
        if not future.ok():
            return future.error()
    return None


def block_on_all(*args: Future) -> Optional[BaseException]:
    """Wait for every future and return the first error among them."""
    first: Optional[BaseException] = None
    for future in args:
        error = future.error()
        if error is not None and first is None:
            first = error
    return first