"""
Timer primitives.

Everything that waits in the game (reveal ticks, the clock, the countdown,
the game-over overlay delay) is a scheduled callback, never a sleep. All
callbacks run on one event loop, one at a time, so a callback always sees a
fully updated session.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol

Callback = Callable[[], None]


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Schedules callbacks on a single serialized queue."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> Handle:
        """Run callback once, delay seconds from now."""

    def call_every(self, interval: float, callback: Callback) -> Handle:
        """Run callback every interval seconds until the handle is cancelled."""
        return RepeatingTask(self, interval, callback).start()


class RepeatingTask:
    """Re-arms a one-shot timer after every run. Cancelling stops it for good."""

    def __init__(self, scheduler: Scheduler, interval: float, callback: Callback) -> None:
        self._scheduler = scheduler
        self._interval = interval
        self._callback = callback
        self._handle: Optional[Handle] = None
        self.cancelled = False

    def start(self) -> "RepeatingTask":
        self._arm()
        return self

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self.cancelled:
            return
        # Re-arm first so the callback may cancel this task
        self._arm()
        self._callback()

    def cancel(self) -> None:
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler(Scheduler):
    """
    Runs callbacks on the asyncio event loop that serves the app.
    Without an explicit loop, the loop running at scheduling time is used,
    so this must be called from inside that loop (async routes, timer callbacks).
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callback) -> Handle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
