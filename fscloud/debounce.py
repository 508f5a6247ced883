"""
Debounce over an injected scheduler.

A scheduler is anything with ``schedule(delay_ms, callback)`` returning a handle
that has ``cancel()``. The Qt window passes a QTimer-based scheduler
(``fscloud.ui.threads.QtScheduler``); tests pass a virtual clock.
"""
from typing import Any, Callable, Optional


class Debouncer:
    def __init__(self, scheduler: Any, delay_ms: int, on_settle: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self.on_settle = on_settle
        self._handle: Optional[Any] = None
        self._seq = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        self.cancel()
        self._seq += 1
        seq = self._seq
        self._handle = self.scheduler.schedule(self.delay_ms, lambda: self._fire(seq))

    def cancel(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    def _fire(self, seq: int) -> None:
        # a superseded timer that still fires is ignored
        if seq != self._seq or self._handle is None:
            return
        self._handle = None
        self.on_settle()
