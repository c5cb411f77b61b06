"""
core/modes.py — Game mode table for TYPErun.

Each mode is a row of data, not a subclass. The engine looks up the
active ModeConfig once per reset and calls its curves without ever
branching on the mode name:

    mode     max_time  decay/tick            rounds  heal on word
    normal   60        0.1 / 0.15 / 0.25     yes     2.0 / 1.5 / 0.8
    chaos    30        0.4                   no      1.5
    zen      999       none                  no      none

Normal mode curves are tiered by round (1-2, 3-5, 6-10). The tiers
live in settings.py as (last_round, value) pairs.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from settings import (
    MAX_TIME,
    NORMAL_DECAY, NORMAL_HEAL,
    CHAOS_DECAY, CHAOS_HEAL,
)


class Mode(str, Enum):
    """Selectable game modes. Values double as the wire names."""
    NORMAL = "normal"
    ZEN    = "zen"
    CHAOS  = "chaos"


def _tiered(tiers: tuple[tuple[int, float], ...]) -> Callable[[int], float]:
    """Build a round → value curve from (last_round, value) tiers.

    Rounds past the final tier reuse its value.
    """
    def curve(round_num: int) -> float:
        for last_round, value in tiers:
            if round_num <= last_round:
                return value
        return tiers[-1][1]
    return curve


def _flat(value: float) -> Callable[[int], float]:
    return lambda _round: value


@dataclass(frozen=True)
class ModeConfig:
    """Tuning for one mode.

    Attributes:
        mode:           The Mode this row describes.
        max_time:       Survival budget in seconds. Also the starting time.
        decay:          Seconds drained per tick, as a function of round.
        heal:           Seconds restored per completed word, by round.
        timed:          False disables decay and the keystroke penalty.
        rounds_enabled: True if round progression runs on the tick.
    """

    mode:           Mode
    max_time:       float
    decay:          Callable[[int], float]
    heal:           Callable[[int], float]
    timed:          bool = True
    rounds_enabled: bool = False


MODES: dict[Mode, ModeConfig] = {
    Mode.NORMAL: ModeConfig(
        mode=Mode.NORMAL,
        max_time=MAX_TIME["normal"],
        decay=_tiered(NORMAL_DECAY),
        heal=_tiered(NORMAL_HEAL),
        rounds_enabled=True,
    ),
    Mode.CHAOS: ModeConfig(
        mode=Mode.CHAOS,
        max_time=MAX_TIME["chaos"],
        decay=_flat(CHAOS_DECAY),
        heal=_flat(CHAOS_HEAL),
    ),
    Mode.ZEN: ModeConfig(
        mode=Mode.ZEN,
        max_time=MAX_TIME["zen"],
        decay=_flat(0.0),
        heal=_flat(0.0),
        timed=False,
    ),
}


def get_mode(mode: Mode | str) -> ModeConfig:
    """Return the ModeConfig for a Mode member or its string value.

    Raises:
        ValueError: If mode is not one of "normal", "zen", "chaos".
    """
    return MODES[Mode(mode)]
