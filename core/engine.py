"""
core/engine.py — Typing-survival game engine for TYPErun.

GameEngine owns every piece of gameplay state and couples the subsystems
inside one synchronous tick:
    - ModeConfig     (time budget, decay and heal curves)
    - SurvivalClock  (remaining seconds, the loss condition)
    - Session        (score, combo, round)
    - Scheduler      (the recurring 100ms tick, deferred HUD emit)
    - EventBus       (the only channel to renderers and audio)

Lifecycle:
    reset_game(mode)  → idle, state filled for mode, HUD emitted next frame
    start_game(mode)  → playing, first word picked, tick running
    tick()            → drain, maybe game over, maybe advance round
    validate_input()  → complete word, penalise typo, or report progress
    game_over/win     → idle, tick cancelled, final score emitted

Tick order (each 100ms while playing):
    1. Drain the mode's decay. At zero: game over, nothing else this tick.
    2. Normal mode only: count the tick toward the round, advance if due.
    3. Emit TimerUpdate.

At most one tick handle exists per engine. Every path that starts a
tick or ends a game goes through _stop_ticker() first, so a restarted
game never drains at double speed.

engine.py does NOT read the keyboard or draw anything. main.py feeds it
keystroke-buffer snapshots and frame deltas; renderers subscribe to its
events.
"""

from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Sequence

from core.events import (
    EventBus, Callback, GameEvent,
    HudUpdate, TimerUpdate, NewWord, InputCheck, MascotError,
    MascotTyping, RoundChange, GameStart, GameOver, GameWin,
)
from core.modes import Mode, ModeConfig, get_mode
from core.scheduler import Scheduler, TickHandle
from core.session import Session
from core.timer import SurvivalClock
from core.words import WORD_LIST, RandomSource, pick_word, corrupt_word
from settings import TICK_S, TOTAL_ROUNDS, ROUND_HEAL_S, ERROR_PENALTY_S

logger = logging.getLogger(__name__)


class InputAction(str, Enum):
    """What the caller should do with its input field after validation."""
    CLEAR    = "clear"
    CONTINUE = "continue"


class GameEngine:
    """Single-player typing survival state machine.

    Attributes:
        scheduler:    Drives the tick. main.py advances it every frame.
        bus:          EventBus that all notifications go through.
        session:      Score, combo, and round state.
        clock:        Survival time.
        config:       ModeConfig for the current game.
        is_playing:   Gates tick effects and input.
        current_word: The target the player must type.
        _rng:         Random source for word choice and corruption.
        _words:       Word bank to draw from.
        _ticker:      The live tick handle, or None when stopped.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        rng: RandomSource | None = None,
        words: Sequence[str] = WORD_LIST,
    ) -> None:
        """Create an idle engine in normal mode.

        Raises:
            ValueError: If words is empty.
        """
        if not words:
            raise ValueError("word list must not be empty")
        self.scheduler:    Scheduler         = scheduler or Scheduler()
        self.bus:          EventBus          = EventBus()
        self.session:      Session           = Session()
        self.clock:        SurvivalClock     = SurvivalClock()
        self.config:       ModeConfig        = get_mode(Mode.NORMAL)
        self.is_playing:   bool              = False
        self.current_word: str               = ""
        self._rng:         RandomSource      = rng or random.Random()
        self._words:       Sequence[str]     = words
        self._ticker:      TickHandle | None = None
        self.clock.start(self.config.max_time)

    # ── Read-only views ───────────────────────────────────────────────────────

    @property
    def mode(self) -> Mode:
        return self.config.mode

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def total_score(self) -> int:
        return self.session.total_score

    @property
    def combo(self) -> int:
        return self.session.combo

    @property
    def round(self) -> int:
        return self.session.round_num

    @property
    def total_rounds(self) -> int:
        return TOTAL_ROUNDS

    @property
    def round_duration(self) -> float:
        return self.session.round_duration()

    @property
    def current_time(self) -> float:
        return self.clock.remaining

    @property
    def max_time(self) -> float:
        return self.clock.max_time

    @property
    def ticking(self) -> bool:
        """True while a tick handle is live."""
        return self._ticker is not None and self._ticker.active

    def hud_state(self) -> HudUpdate:
        """Snapshot of everything the HUD shows."""
        return HudUpdate(
            score=self.session.score,
            total_score=self.session.total_score,
            combo=self.session.combo,
            round=self.session.round_num,
            total_rounds=TOTAL_ROUNDS,
            mode=self.mode.value,
            time=self.clock.remaining,
        )

    # ── Events ────────────────────────────────────────────────────────────────

    def on(self, event: str | type, callback: Callback) -> None:
        """Subscribe to an event by class or wire name, e.g. "new-word"."""
        self.bus.on(event, callback)

    def off(self, event: str | type, callback: Callback) -> None:
        self.bus.off(event, callback)

    def _emit(self, event: GameEvent) -> None:
        self.bus.emit(event)

    def _emit_hud(self) -> None:
        self._emit(self.hud_state())

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def init(self) -> None:
        """One-time setup: an idle normal-mode game."""
        self.reset_game(Mode.NORMAL)

    def reset_game(self, mode: Mode | str = Mode.NORMAL) -> None:
        """Stop any running game and refill state for mode.

        The initial HUD is emitted on the next scheduler advance, so
        subscribers registered right after this call still receive it.

        Raises:
            ValueError: If mode is not a known mode.
        """
        config = get_mode(mode)
        self._stop_ticker()
        self.config = config
        self.session.reset()
        self.clock.start(config.max_time)
        self.is_playing = False
        self.scheduler.call_soon(self._emit_hud)

    def start_game(self, mode: Mode | str | None = None) -> None:
        """Begin play, resetting into mode first when one is given."""
        if mode is not None:
            self.reset_game(mode)
        self.is_playing = True
        self.next_word()
        self._start_ticker()
        logger.info("game started: mode=%s max_time=%.1f", self.mode.value, self.clock.max_time)
        self._emit(GameStart(mode=self.mode.value))

    def game_over(self) -> None:
        """Survival time ran out."""
        self.is_playing = False
        self._stop_ticker()
        logger.info("game over: score=%d total=%d round=%d",
                    self.session.score, self.session.total_score, self.session.round_num)
        self._emit(GameOver(score=self.session.score, total_score=self.session.total_score))

    def game_win(self) -> None:
        """The final round was survived."""
        self.is_playing = False
        self._stop_ticker()
        logger.info("game won: score=%d total=%d", self.session.score, self.session.total_score)
        self._emit(GameWin(score=self.session.score, total_score=self.session.total_score))

    # ── Tick ──────────────────────────────────────────────────────────────────

    def _start_ticker(self) -> None:
        self._stop_ticker()
        self._ticker = self.scheduler.call_every(TICK_S, self.tick)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def tick(self) -> None:
        """Advance the survival clock and round by one 100ms step.

        No-op while not playing.
        """
        if not self.is_playing:
            return

        if self.config.timed:
            self.clock.drain(self.config.decay(self.session.round_num))
            if self.clock.is_expired():
                self.game_over()
                return

        if self.config.rounds_enabled and self.session.tick_round():
            self.advance_round()

        self._emit(TimerUpdate(
            time=self.clock.remaining,
            max=self.clock.max_time,
            round_progress=self.session.round_progress(),
        ))

    def advance_round(self) -> None:
        """Move to the next round, or win if this was the last one."""
        if self.session.is_final_round():
            self.game_win()
            return

        self.session.next_round()
        if self.config.timed:
            self.clock.heal(ROUND_HEAL_S)
        logger.debug("round %d/%d, time=%.2f", self.session.round_num, TOTAL_ROUNDS, self.clock.remaining)
        self._emit(RoundChange(round=self.session.round_num))
        self._emit_hud()

    # ── Words ─────────────────────────────────────────────────────────────────

    def next_word(self) -> None:
        """Pick the next target, corrupting it in chaos mode."""
        word = pick_word(self._words, self._rng)
        if self.mode is Mode.CHAOS:
            word = corrupt_word(word, self._rng)
        self.current_word = word
        self._emit(NewWord(word=word))

    def word_completed(self) -> None:
        """Score the word, heal by the mode's curve, and move on."""
        points = self.session.register_word()
        if self.config.timed:
            self.clock.heal(self.config.heal(self.session.round_num))
        logger.debug("word %r +%d (combo %d)", self.current_word, points, self.session.combo)
        self._emit_hud()
        self._emit(MascotTyping())
        self.next_word()

    # ── Input ─────────────────────────────────────────────────────────────────

    def validate_input(self, text: str) -> InputAction | None:
        """Check a snapshot of the player's input against the target.

        Input is trimmed and lowercased. An exact match completes the
        word. Otherwise the input is walked against the target until the
        first wrong character, or the first character past the target's
        end. A mistake costs ERROR_PENALTY_S (timed modes) and the combo;
        it never ends the game here, only the tick does that.

        Any input length is accepted. Capping the field is the caller's job.

        Args:
            text: Full current contents of the input field.

        Returns:
            InputAction.CLEAR after a completed word, InputAction.CONTINUE
            otherwise, or None when no game is in progress.
        """
        if not self.is_playing:
            return None

        typed  = text.strip().lower()
        target = self.current_word

        if typed == target:
            self.word_completed()
            return InputAction.CLEAR

        match_length = 0
        error_index  = -1
        for i, char in enumerate(typed):
            if i >= len(target) or char != target[i]:
                error_index = i
                break
            match_length += 1
        is_error = error_index >= 0

        if is_error:
            self._emit(MascotError())
            if self.config.timed:
                self.clock.drain(ERROR_PENALTY_S)
            if self.session.break_combo():
                self._emit_hud()
        else:
            self._emit(MascotTyping())

        self._emit(InputCheck(
            match_length=match_length,
            is_error=is_error,
            error_index=error_index,
            input_length=len(typed),
        ))
        return InputAction.CONTINUE
