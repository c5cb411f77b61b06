"""
core/game.py — Screen state machine and input routing for TYPErun.

Game sits between pygame and the GameEngine. It owns the screens, the
raw keystroke buffer, and the HudView; the engine owns the rules.

States:
    MENU     — title screen, pick a mode with 1/2/3
    PLAYING  — engine running, keystrokes edit the buffer
    ENDED    — game over or win overlay on top of the last frame

Transitions:
    MENU     → PLAYING  : player picks a mode
    PLAYING  → ENDED    : engine emits game-over or game-win
    PLAYING  → MENU     : Esc abandons the game
    ENDED    → MENU     : Enter or R

The buffer is capped at MAX_INPUT_LEN here, before the engine sees it.
Every edit (character or backspace) sends the whole buffer to
validate_input(), and a CLEAR answer empties it.

game.py does NOT call pygame.display.flip() or manage the window.
That is main.py's responsibility.
"""

from __future__ import annotations
import logging
import pygame
from enum import Enum, auto

from core.engine import GameEngine, InputAction
from core.events import GameOver, GameWin
from core.modes import Mode
from renderer import ui
from settings import COLOR, MAX_INPUT_LEN

logger = logging.getLogger(__name__)

_MODE_KEYS = {
    pygame.K_1: Mode.NORMAL, pygame.K_KP1: Mode.NORMAL,
    pygame.K_2: Mode.ZEN,    pygame.K_KP2: Mode.ZEN,
    pygame.K_3: Mode.CHAOS,  pygame.K_KP3: Mode.CHAOS,
}


class GameState(Enum):
    """Top-level screen states."""
    MENU    = auto()
    PLAYING = auto()
    ENDED   = auto()


class Game:
    """Routes pygame input to the engine and draws the current screen.

    Attributes:
        state:   Current GameState.
        engine:  The GameEngine holding all gameplay state.
        view:    HudView fed by the engine's events.
        typed:   The player's current input buffer.
    """

    def __init__(self, engine: GameEngine | None = None) -> None:
        """Wire the view to the engine and park on the menu."""
        self.engine: GameEngine   = engine or GameEngine()
        self.view:   ui.HudView   = ui.HudView()
        self.state:  GameState    = GameState.MENU
        self.typed:  str          = ""

        self.view.attach(self.engine.bus)
        self.engine.on(GameOver, self._on_game_end)
        self.engine.on(GameWin,  self._on_game_end)
        self.engine.init()

    def set_audio(self, audio) -> None:
        """Attach an initialised Audio so it hears engine events."""
        audio.attach(self.engine.bus)

    # ── State transitions ─────────────────────────────────────────────────────

    def start_menu(self) -> None:
        """Return to the title screen, stopping any running game."""
        self.typed = ""
        self.engine.reset_game(self.engine.mode)
        self.state = GameState.MENU

    def start_game(self, mode: Mode) -> None:
        """Begin a fresh game in mode."""
        self.typed = ""
        self.state = GameState.PLAYING
        self.engine.start_game(mode)

    def _on_game_end(self, _event) -> None:
        self.state = GameState.ENDED

    # ── Per-frame update ──────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Advance the engine's scheduler and the view's animations."""
        self.engine.scheduler.advance(dt)
        self.view.update(dt)

    # ── Event handling ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route a KEYDOWN to the handler for the current state."""
        if event.type != pygame.KEYDOWN:
            return

        if self.state == GameState.MENU:
            mode = _MODE_KEYS.get(event.key)
            if mode is not None:
                self.start_game(mode)

        elif self.state == GameState.PLAYING:
            self._handle_typing(event)

        elif self.state == GameState.ENDED:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_r):
                self.start_menu()

    def _handle_typing(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_ESCAPE:
            logger.info("game abandoned at score %d", self.engine.score)
            self.start_menu()
            return

        if event.key == pygame.K_BACKSPACE:
            if not self.typed:
                return
            self.typed = self.typed[:-1]
        else:
            char = event.unicode
            if not char or not char.isprintable() or char.isspace():
                return
            if len(self.typed) >= MAX_INPUT_LEN:
                return
            self.typed += char

        self.submit(self.typed)

    def submit(self, text: str) -> None:
        """Send a buffer snapshot to the engine and apply its answer."""
        self.typed = text
        if self.engine.validate_input(text) is InputAction.CLEAR:
            self.typed = ""

    # ── Rendering ─────────────────────────────────────────────────────────────

    def render(self, surface: pygame.Surface) -> None:
        """Draw the current state onto the game surface."""
        surface.fill(COLOR["background"])

        if self.state == GameState.MENU:
            ui.draw_menu(surface, self.engine.total_score)

        elif self.state == GameState.PLAYING:
            ui.draw_playing(surface, self.view, self.typed)

        elif self.state == GameState.ENDED:
            ui.draw_playing(surface, self.view, self.typed)
            score, total = self.view.final
            ui.draw_game_end(surface, self.view.result or "over", score, total)
