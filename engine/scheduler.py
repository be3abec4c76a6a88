"""
scheduler.py — Cooperative timer
=================================
The playback controller needs exactly one thing from its host: "call me
back in N seconds, and let me cancel that".  Anything with

    handle = scheduler.call_later(delay_seconds, callback)
    handle.cancel()

will do, which is precisely the asyncio event-loop API.  For hosts that
have no event loop (the Flask app, tests) TickScheduler provides the same
interface, driven by the host calling `tick()` from whatever loop it
already has (a polling request, a GUI idle callback, …).

Everything runs on the caller's thread.  Nothing here is thread-safe.
"""

import time
from typing import Callable, List, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class TickHandle:
    __slots__ = ("when", "callback", "_cancelled")

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when      = when
        self.callback  = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "pending"
        return f"TickHandle(when={self.when:.3f}, {state})"


class TickScheduler:
    """
    Attributes:
        clock : Zero-arg callable returning seconds (time.monotonic by default).
                Tests pass a fake clock they can advance by hand.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._pending: List[TickHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> TickHandle:
        handle = TickHandle(self.clock() + max(0.0, delay), callback)
        self._pending.append(handle)
        return handle

    def tick(self) -> int:
        """
        Fire every callback that is due.  Callbacks scheduled while
        ticking wait for the next tick.  Returns the number fired.
        """
        now = self.clock()
        self._pending = [h for h in self._pending if not h.cancelled()]
        due = sorted((h for h in self._pending if h.when <= now), key=lambda h: h.when)
        self._pending = [h for h in self._pending if h.when > now]

        fired = 0
        for handle in due:
            # an earlier callback in this batch may have cancelled it
            if handle.cancelled():
                continue
            handle.callback()
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) handles."""
        return sum(1 for h in self._pending if not h.cancelled())
