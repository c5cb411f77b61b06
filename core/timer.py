"""
core/timer.py — Survival clock for TYPErun.

The survival clock is the player's health: it drains every tick, loses a
chunk on each wrong keystroke, and is topped up by completed words and
round advances. SurvivalClock owns only the numbers. It does not know
about ticks, modes, or events. engine.py decides when and by how much to
drain or heal, then polls is_expired().

Every mutation clamps to [0, max_time] and rounds to six decimals so
repeated decimal steps land exactly (30.0 drained by 0.4 reaches 0.0 on
the 75th step, not a hair above it).

Usage:
    clock = SurvivalClock()
    clock.start(max_time=60.0)

    # each tick:
    clock.drain(0.1)
    if clock.is_expired():
        # handle game over in engine.py
"""

from __future__ import annotations

_PRECISION = 6


class SurvivalClock:
    """Countdown of remaining survival seconds.

    Attributes:
        max_time:  Upper bound and starting value for the current game.
        remaining: Seconds left. Always within [0, max_time].
    """

    def __init__(self) -> None:
        """Initialise an empty clock. Call start() before use."""
        self.max_time:  float = 0.0
        self.remaining: float = 0.0

    def start(self, max_time: float) -> None:
        """Fill the clock to max_time for a fresh game."""
        self.max_time  = float(max_time)
        self.remaining = self.max_time

    def _set(self, value: float) -> None:
        self.remaining = round(min(self.max_time, max(0.0, value)), _PRECISION)

    def drain(self, seconds: float) -> None:
        """Subtract seconds, stopping at zero."""
        self._set(self.remaining - seconds)

    def heal(self, seconds: float) -> None:
        """Add seconds, stopping at max_time."""
        self._set(self.remaining + seconds)

    def is_expired(self) -> bool:
        """Return True once no time remains."""
        return self.remaining <= 0.0
