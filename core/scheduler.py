"""
core/scheduler.py — Frame-driven callback scheduler for TYPErun.

The engine never sleeps or spawns threads. main.py feeds the frame delta
into Scheduler.advance(dt) once per frame and the scheduler fires any
callbacks that have come due, all on the caller's thread:

    scheduler = Scheduler()
    handle = scheduler.call_every(0.1, engine.tick)
    scheduler.call_soon(lambda: print("next frame"))

    # each frame:
    scheduler.advance(dt)

    # when done:
    handle.cancel()

Time is kept in integer microseconds so a 100ms period lands exactly on
every tenth of a second no matter how the frame deltas are sliced. A
recurring handle that falls behind (dt longer than its period) fires
once per missed period within the same advance() call.
"""

from __future__ import annotations
from typing import Callable

_US_PER_S = 1_000_000


def _to_us(seconds: float) -> int:
    return round(seconds * _US_PER_S)


class TickHandle:
    """Cancellable handle for a recurring callback.

    Attributes:
        period_us: Interval between fires in microseconds.
        due_us:    Scheduler time of the next fire.
        active:    False once cancel() has been called.
    """

    def __init__(self, period_us: int, due_us: int, callback: Callable[[], None]) -> None:
        self.period_us = period_us
        self.due_us    = due_us
        self.active    = True
        self._callback = callback

    def cancel(self) -> None:
        """Stop future fires. Safe to call more than once."""
        self.active = False

    def fire(self) -> None:
        self.due_us += self.period_us
        self._callback()


class Scheduler:
    """Cooperative scheduler driven by explicit advance() calls.

    Attributes:
        now_us:    Microseconds advanced since construction.
        _soon:     One-shot callbacks queued for the next advance().
        _handles:  Recurring handles, cancelled ones pruned lazily.
    """

    def __init__(self) -> None:
        self.now_us: int = 0
        self._soon:    list[Callable[[], None]] = []
        self._handles: list[TickHandle] = []

    @property
    def now(self) -> float:
        """Scheduler clock in seconds."""
        return self.now_us / _US_PER_S

    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run callback once at the start of the next advance()."""
        self._soon.append(callback)

    def call_every(self, period: float, callback: Callable[[], None]) -> TickHandle:
        """Run callback every `period` seconds until the handle is cancelled.

        The first fire is one full period from now.

        Raises:
            ValueError: If period is not positive.
        """
        period_us = _to_us(period)
        if period_us <= 0:
            raise ValueError(f"period must be positive, got {period!r}")
        handle = TickHandle(period_us, self.now_us + period_us, callback)
        self._handles.append(handle)
        return handle

    def advance(self, dt: float) -> None:
        """Move the clock forward by dt seconds and fire what is due.

        Deferred one-shots run first, then recurring handles in order of
        their due time. A handle cancelled by an earlier callback in the
        same advance() does not fire again.
        """
        soon, self._soon = self._soon, []
        for callback in soon:
            callback()

        target = self.now_us + max(0, _to_us(dt))
        while True:
            due = [h for h in self._handles if h.active and h.due_us <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due_us)
            self.now_us = handle.due_us
            handle.fire()
        self.now_us = target
        self._handles = [h for h in self._handles if h.active]

    def pending(self) -> int:
        """Number of live recurring handles."""
        return sum(1 for h in self._handles if h.active)
