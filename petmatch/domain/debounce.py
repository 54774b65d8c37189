# SPDX-License-Identifier: Apache-2.0

"""
Debounced query pipeline.

Raw text-input events become a committed search term once input has been
quiet for a full window. Timing goes through a Scheduler so the pipeline can
run on an asyncio loop or on a virtual clock in tests.
"""

import asyncio
import heapq
import itertools
from typing import Callable, Generic, List, Optional, Protocol, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_WINDOW_MS = 300


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Clock and timer source. Delays and times are in milliseconds."""

    def now(self) -> float:
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ManualTimer:
    """Timer owned by a ManualScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Virtual clock for deterministic tests.

    Time only moves when ``advance`` is called; timers due within the
    advanced span fire in due order, with ``now()`` set to their due time.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(0.0, float(delay_ms)), callback)
        heapq.heappush(self._queue, (timer.due, next(self._sequence), timer))
        return timer

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        target = self._now + float(delta_ms)
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = due
            timer.callback()
        self._now = target

    def advance_to(self, time_ms: float) -> None:
        """Move the clock to an absolute time."""
        self.advance(max(0.0, time_ms - self._now))

    @property
    def pending(self) -> int:
        """Number of live timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)


class DebouncedQuery(Generic[T]):
    """
    Commit the latest input value after a quiescence window.

    Each ``push`` cancels the pending commit and schedules a new one with the
    latest value. After ``close`` nothing is committed and further input is
    ignored.
    """

    def __init__(
        self,
        on_commit: Callable[[T], None],
        scheduler: Scheduler,
        window_ms: float = DEFAULT_WINDOW_MS
    ):
        if window_ms < 0:
            raise ValueError("Debounce window cannot be negative")
        self._on_commit = on_commit
        self._scheduler = scheduler
        self.window_ms = window_ms
        self._timer: Optional[TimerHandle] = None
        self._pending_value: Optional[T] = None
        self._has_pending = False
        self._closed = False

    @property
    def pending(self) -> bool:
        """Whether a commit is scheduled."""
        return self._has_pending

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: T) -> None:
        """Record an input event and (re)start the quiescence window."""
        if self._closed:
            return
        self._cancel_timer()
        self._pending_value = value
        self._has_pending = True
        self._timer = self._scheduler.call_later(self.window_ms, self._fire)

    def cancel(self) -> None:
        """Drop the pending value without committing it."""
        self._cancel_timer()
        self._has_pending = False
        self._pending_value = None

    def close(self) -> None:
        """Tear down: cancel the pending commit and ignore later input."""
        self.cancel()
        self._closed = True

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        if self._closed or not self._has_pending:
            return
        value = self._pending_value
        self._timer = None
        self._pending_value = None
        self._has_pending = False
        self._on_commit(value)
