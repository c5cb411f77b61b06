"""
core/audio.py — Event-driven sound effects for TYPErun.

Generates every sound programmatically with plain Python math (no numpy,
no audio files) and plays them in response to engine events. The engine
knows nothing about audio; Audio.attach() subscribes to its bus.

Sound design (C major, square waves for the terminal-beep feel):
    key    — E6 tick (1319Hz)             — a correct keystroke
    error  — A3 buzz (220Hz)              — wrong character
    word   — G5→C6 blip (784→1047Hz)      — word completed
    round  — C4 E4 G4 C5 arpeggio         — next round reached
    start  — 200→800Hz sine sweep         — game is beginning
    over   — E4→C4→A3 descent             — out of time
    win    — C5 E5 G5 C6 arpeggio, held   — final round survived

Usage:
    audio = Audio()
    audio.init()
    audio.attach(engine.bus)
"""

from __future__ import annotations
import logging
import math
import struct
import pygame

from core.events import (
    EventBus, HudUpdate, MascotTyping, MascotError, RoundChange,
    GameStart, GameOver, GameWin,
)

logger = logging.getLogger(__name__)

# ── Synthesis constants ───────────────────────────────────────────────────────
_SAMPLE_RATE = 22050
_MAX_AMP     = 32767   # int16 max


def _pack(samples: list[float]) -> bytes:
    """Pack float samples in [-1.0, 1.0] into signed 16-bit stereo PCM.

    Mono is duplicated into L+R so the stereo mixer accepts it.
    """
    buf = []
    for s in samples:
        v = int(max(-1.0, min(1.0, s)) * _MAX_AMP)
        buf.append(struct.pack("<hh", v, v))
    return b"".join(buf)


def _square(freq: float, duration: float, volume: float = 0.3) -> list[float]:
    n = int(_SAMPLE_RATE * duration)
    period = _SAMPLE_RATE / freq
    return [volume * (1.0 if (i % period) < (period / 2) else -1.0) for i in range(n)]


def _sweep(f_start: float, f_end: float, duration: float, volume: float = 0.3) -> list[float]:
    """Sine glide from f_start to f_end over duration seconds."""
    n = int(_SAMPLE_RATE * duration)
    samples = []
    phase = 0.0
    for i in range(n):
        freq = f_start + (f_end - f_start) * (i / n)
        phase += 2 * math.pi * freq / _SAMPLE_RATE
        samples.append(volume * math.sin(phase))
    return samples


def _concat(*parts: list[float]) -> list[float]:
    result = []
    for p in parts:
        result.extend(p)
    return result


def _fade_out(samples: list[float], tail: float = 0.05) -> list[float]:
    """Linear fade over the last `tail` seconds to avoid clicks."""
    fade_n = min(int(_SAMPLE_RATE * tail), len(samples))
    result = list(samples)
    for i in range(fade_n):
        idx = len(result) - fade_n + i
        result[idx] *= (fade_n - 1 - i) / fade_n
    return result


def _arpeggio(freqs: tuple[float, ...], step: float, hold: float, volume: float) -> list[float]:
    """Notes of `step` seconds each, the last one held for `hold`."""
    *head, last = freqs
    return _concat(*(_square(f, step, volume) for f in head), _square(last, hold, volume))


SOUND_BANK = {
    "key":   lambda: _fade_out(_square(1319, 0.02, volume=0.10), tail=0.01),
    "error": lambda: _fade_out(_square(220, 0.09, volume=0.25)),
    "word":  lambda: _fade_out(_concat(_square(784, 0.04, 0.22), _square(1047, 0.06, 0.22))),
    "round": lambda: _fade_out(_arpeggio((261, 329, 392, 523), 0.07, 0.12, 0.30)),
    "start": lambda: _fade_out(_sweep(200, 800, 0.25, volume=0.30)),
    "over":  lambda: _fade_out(_arpeggio((329, 261, 220), 0.08, 0.16, 0.28)),
    "win":   lambda: _fade_out(_arpeggio((523, 659, 784, 1047), 0.08, 0.30, 0.30), tail=0.12),
}


# ── Audio manager ─────────────────────────────────────────────────────────────

class Audio:
    """Synthesises the sound bank and plays it on engine events.

    Attributes:
        _sounds:    Sound name → pygame.mixer.Sound.
        _available: True if pygame.mixer initialised successfully.
        _score:     Last score seen on update-hud. A rise means a word landed.
    """

    def __init__(self) -> None:
        """Create an uninitialised manager. Call init() before use."""
        self._sounds:    dict[str, pygame.mixer.Sound] = {}
        self._available: bool = False
        self._score:     int  = 0

    @property
    def available(self) -> bool:
        return self._available

    def init(self) -> None:
        """Initialise pygame.mixer and synthesise every sound.

        Safe to call more than once. Falls back to silence if the mixer
        cannot open a device.
        """
        try:
            pygame.mixer.pre_init(_SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
            self._sounds = {
                name: pygame.mixer.Sound(buffer=_pack(build()))
                for name, build in SOUND_BANK.items()
            }
            self._available = True
        except pygame.error as exc:
            logger.warning("audio disabled: %s", exc)
            self._available = False

    def attach(self, bus: EventBus) -> None:
        """Subscribe to the engine events that have a sound."""
        bus.on(MascotTyping, lambda _e: self.play("key"))
        bus.on(MascotError,  lambda _e: self.play("error"))
        bus.on(RoundChange,  lambda _e: self.play("round"))
        bus.on(GameStart,    lambda _e: self.play("start"))
        bus.on(GameOver,     lambda _e: self.play("over"))
        bus.on(GameWin,      lambda _e: self.play("win"))
        bus.on(HudUpdate,    self._on_hud)

    def _on_hud(self, event: HudUpdate) -> None:
        # score only rises on a completed word
        if event.score > self._score:
            self.play("word")
        self._score = event.score

    def play(self, name: str) -> None:
        """Play a sound by name. Silent no-op if unavailable or unknown."""
        if not self._available:
            return
        sound = self._sounds.get(name)
        if sound:
            sound.play()

    def quit(self) -> None:
        """Shut down pygame.mixer on exit."""
        if self._available:
            pygame.mixer.quit()
            self._available = False
