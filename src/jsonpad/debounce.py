"""Single-slot deferred task register used to debounce saves."""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    def stop(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class DeferredTask:
    """Holds at most one pending callback.

    *scheduler* has the shape of Textual's ``set_timer``: it takes a delay
    and a callback and returns a handle with ``stop()``. Scheduling a new
    callback stops the pending one first, so a burst of calls collapses
    into a single run after the last call has been quiet for *delay*.
    """

    def __init__(self, scheduler: Scheduler, delay: float = 1.0) -> None:
        self._scheduler = scheduler
        self.delay = delay
        self._handle: TimerHandle | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self.cancel()
        self._callback = callback
        self._handle = self._scheduler(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.stop()
        self._handle = None
        self._callback = None

    def flush(self) -> None:
        """Run the pending callback now, if there is one."""
        callback = self._callback
        self.cancel()
        if callback is not None:
            callback()

    def _fire(self) -> None:
        callback = self._callback
        self._handle = None
        self._callback = None
        if callback is not None:
            callback()
