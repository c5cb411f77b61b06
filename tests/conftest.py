from __future__ import annotations

import os

# Headless pygame for the renderer and input tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import random

import pytest

from core.engine import GameEngine
from core.events import EVENT_TYPES, EventBus
from core.scheduler import Scheduler


class Recorder:
    """Collects every event emitted on a bus, in order."""

    def __init__(self, bus: EventBus) -> None:
        self.events: list = []
        for name in EVENT_TYPES:
            bus.on(name, self.events.append)

    def of(self, cls: type) -> list:
        return [e for e in self.events if isinstance(e, cls)]

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def clear(self) -> None:
        self.events.clear()


class ScriptedRng:
    """Random source that replays fixed draws."""

    def __init__(self, randoms=(), ranges=()) -> None:
        self._randoms = list(randoms)
        self._ranges = list(ranges)

    def random(self) -> float:
        return self._randoms.pop(0)

    def randrange(self, stop: int) -> int:
        value = self._ranges.pop(0)
        assert 0 <= value < stop
        return value


@pytest.fixture
def make_engine():
    def factory(words=("grep",), seed=1234) -> GameEngine:
        return GameEngine(scheduler=Scheduler(), rng=random.Random(seed), words=words)
    return factory


@pytest.fixture
def engine(make_engine) -> GameEngine:
    return make_engine()


@pytest.fixture
def recorder(engine) -> Recorder:
    return Recorder(engine.bus)


@pytest.fixture(scope="session")
def pygame_display():
    import pygame

    pygame.init()
    yield pygame
    pygame.quit()


@pytest.fixture
def record():
    """Attach a Recorder to any bus."""
    return Recorder


@pytest.fixture
def scripted_rng():
    return ScriptedRng
