"""
core/events.py — Typed event channel between the engine and its renderers.

Every notification the engine sends is a frozen dataclass with a fixed
payload shape. The `name` class attribute is the wire name a presentation
layer subscribes with, and payload() returns the camelCase dict form:

    update-hud     HudUpdate     {score, totalScore, combo, round, totalRounds, mode, time}
    update-timer   TimerUpdate   {time, max, roundProgress}
    new-word       NewWord       {word}
    input-check    InputCheck    {matchLength, isError, errorIndex, inputLength}
    mascot-error   MascotError   {}
    mascot-typing  MascotTyping  {}
    round-change   RoundChange   {round}
    game-start     GameStart     {mode}
    game-over      GameOver      {score, totalScore}
    game-win       GameWin       {score, totalScore}

Delivery is synchronous. Callbacks for one event run in registration
order; exceptions raised by a callback propagate to whoever emitted.

Usage:
    bus = EventBus()
    bus.on(NewWord, lambda e: print(e.word))
    bus.on("game-over", on_game_over)
    bus.emit(NewWord(word="grep"))
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Callable, ClassVar, Union


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class _Event:
    name: ClassVar[str] = ""

    def payload(self) -> dict:
        """Return the event data keyed by camelCase field names."""
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class HudUpdate(_Event):
    name: ClassVar[str] = "update-hud"

    score:        int
    total_score:  int
    combo:        int
    round:        int
    total_rounds: int
    mode:         str
    time:         float


@dataclass(frozen=True)
class TimerUpdate(_Event):
    name: ClassVar[str] = "update-timer"

    time:           float
    max:            float
    round_progress: float


@dataclass(frozen=True)
class NewWord(_Event):
    name: ClassVar[str] = "new-word"

    word: str


@dataclass(frozen=True)
class InputCheck(_Event):
    name: ClassVar[str] = "input-check"

    match_length: int
    is_error:     bool
    error_index:  int      # -1 when there is no error
    input_length: int


@dataclass(frozen=True)
class MascotError(_Event):
    name: ClassVar[str] = "mascot-error"


@dataclass(frozen=True)
class MascotTyping(_Event):
    name: ClassVar[str] = "mascot-typing"


@dataclass(frozen=True)
class RoundChange(_Event):
    name: ClassVar[str] = "round-change"

    round: int


@dataclass(frozen=True)
class GameStart(_Event):
    name: ClassVar[str] = "game-start"

    mode: str


@dataclass(frozen=True)
class GameOver(_Event):
    name: ClassVar[str] = "game-over"

    score:       int
    total_score: int


@dataclass(frozen=True)
class GameWin(_Event):
    name: ClassVar[str] = "game-win"

    score:       int
    total_score: int


GameEvent = Union[
    HudUpdate, TimerUpdate, NewWord, InputCheck, MascotError,
    MascotTyping, RoundChange, GameStart, GameOver, GameWin,
]

EVENT_TYPES: dict[str, type] = {
    cls.name: cls
    for cls in (
        HudUpdate, TimerUpdate, NewWord, InputCheck, MascotError,
        MascotTyping, RoundChange, GameStart, GameOver, GameWin,
    )
}

Callback = Callable[[GameEvent], None]


def _resolve(event: str | type) -> str:
    """Map an event class or wire name to the wire name.

    Raises:
        ValueError: If the name is not a known event.
    """
    name = event if isinstance(event, str) else getattr(event, "name", None)
    if name not in EVENT_TYPES:
        raise ValueError(f"Unknown event: {event!r}")
    return name


class EventBus:
    """Synchronous publish/subscribe keyed by event wire name.

    Attributes:
        _listeners: Wire name → callbacks in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callback]] = {}

    def on(self, event: str | type, callback: Callback) -> None:
        """Subscribe callback to an event class or wire name."""
        self._listeners.setdefault(_resolve(event), []).append(callback)

    def off(self, event: str | type, callback: Callback) -> None:
        """Remove one registration of callback. No-op if not subscribed."""
        callbacks = self._listeners.get(_resolve(event), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: GameEvent) -> None:
        """Deliver event to every subscriber of its name, in order."""
        # Copy so a callback may unsubscribe itself mid-delivery
        for callback in list(self._listeners.get(event.name, ())):
            callback(event)
