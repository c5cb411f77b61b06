"""
renderer/ui.py — HUD and screen rendering for TYPErun.

Two halves:
    HudView      : subscribes to the engine's events and keeps the latest
                   payload of each kind. Pure state, no pygame calls, so it
                   can be driven headless in tests.
    draw_*()     : stateless functions that take explicit data and draw to
                   the provided surface. No global state is read except
                   constants from settings.py.

The renderer never calls engine methods. Everything it shows arrived
as an event.

Coordinate system: native 480x640 game space.
"""

from __future__ import annotations
import pygame

from core.events import (
    EventBus, HudUpdate, TimerUpdate, NewWord, InputCheck,
    MascotError, MascotTyping, GameStart, GameOver, GameWin,
)
from settings import (
    SCREEN_W, SCREEN_H,
    HEADER_H, TIMER_BAR_H, ROUND_BAR_H, INPUT_BOX_H, INPUT_BOX_W,
    COLOR,
    FONT_FAMILY, FONT_SIZE_XL, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)

# Seconds the mascot holds a reaction before relaxing
_MOOD_HOLD_S = 0.35

# Survival fraction below which the bar turns red
_LOW_TIME_FILL = 0.25


# ── Event-fed view state ──────────────────────────────────────────────────────

class HudView:
    """Latest engine state as seen through its events.

    Attributes:
        hud:       Last HudUpdate, or None before the first one.
        timer:     Last TimerUpdate, or None until the first tick.
        word:      Current target word.
        check:     Last InputCheck for the current word, or None.
        mood:      Mascot reaction: "idle", "typing", or "error".
        result:    "over" or "win" once the game has ended, else None.
        final:     (score, total_score) from the terminal event.
        _mood_t:   Seconds left before mood falls back to "idle".
    """

    def __init__(self) -> None:
        self.hud:    HudUpdate | None   = None
        self.timer:  TimerUpdate | None = None
        self.word:   str                = ""
        self.check:  InputCheck | None  = None
        self.mood:   str                = "idle"
        self.result: str | None         = None
        self.final:  tuple[int, int]    = (0, 0)
        self._mood_t: float             = 0.0

    def attach(self, bus: EventBus) -> None:
        """Subscribe to every event the HUD draws."""
        bus.on(HudUpdate,    self._on_hud)
        bus.on(TimerUpdate,  self._on_timer)
        bus.on(NewWord,      self._on_word)
        bus.on(InputCheck,   self._on_check)
        bus.on(MascotError,  lambda _e: self._react("error"))
        bus.on(MascotTyping, lambda _e: self._react("typing"))
        bus.on(GameStart,    self._on_start)
        bus.on(GameOver,     lambda e: self._on_end("over", e.score, e.total_score))
        bus.on(GameWin,      lambda e: self._on_end("win", e.score, e.total_score))

    def _on_hud(self, event: HudUpdate) -> None:
        self.hud = event

    def _on_timer(self, event: TimerUpdate) -> None:
        self.timer = event

    def _on_word(self, event: NewWord) -> None:
        self.word  = event.word
        self.check = None

    def _on_check(self, event: InputCheck) -> None:
        self.check = event

    def _on_start(self, _event: GameStart) -> None:
        self.result = None
        self.timer  = None
        self.mood   = "idle"

    def _on_end(self, result: str, score: int, total_score: int) -> None:
        self.result = result
        self.final  = (score, total_score)

    def _react(self, mood: str) -> None:
        self.mood    = mood
        self._mood_t = _MOOD_HOLD_S

    def update(self, dt: float) -> None:
        """Let the mascot reaction fade back to idle."""
        if self._mood_t > 0.0:
            self._mood_t = max(0.0, self._mood_t - dt)
            if self._mood_t == 0.0:
                self.mood = "idle"

    def time_fill(self) -> float:
        """Survival bar fill in [0.0, 1.0]."""
        if self.timer is not None and self.timer.max > 0:
            return max(0.0, min(1.0, self.timer.time / self.timer.max))
        return 1.0

    def round_fill(self) -> float:
        if self.timer is None:
            return 0.0
        return max(0.0, min(1.0, self.timer.round_progress / 100))


# ── Font cache ────────────────────────────────────────────────────────────────
_fonts: dict[tuple[int, bool], pygame.font.Font] = {}


def _font(size: int, bold: bool = False) -> pygame.font.Font:
    """Return a cached monospace font at the given size."""
    key = (size, bold)
    if key not in _fonts:
        _fonts[key] = pygame.font.SysFont(FONT_FAMILY, size, bold=bold)
    return _fonts[key]


def _blit_centered(surface: pygame.Surface, text: pygame.Surface, y: int) -> None:
    surface.blit(text, (SCREEN_W // 2 - text.get_width() // 2, y))


# ── Header ────────────────────────────────────────────────────────────────────

def draw_header(surface: pygame.Surface, hud: HudUpdate) -> None:
    """Draw the top bar: mode and round on the left, score and combo right."""
    pygame.draw.rect(surface, COLOR["panel"], (0, 0, SCREEN_W, HEADER_H))
    pygame.draw.line(surface, COLOR["panel_border"], (0, HEADER_H - 1), (SCREEN_W, HEADER_H - 1))

    f_md = _font(FONT_SIZE_MD)
    f_sm = _font(FONT_SIZE_SM)

    mode = f_sm.render(hud.mode.upper(), True, COLOR["text_dim"])
    surface.blit(mode, (14, 12))
    if hud.mode == "normal":
        label = f"Round {hud.round}/{hud.total_rounds}"
    else:
        label = "Endless"
    surface.blit(f_md.render(label, True, COLOR["text"]), (14, 34))

    score = f_md.render(f"Score {hud.score}", True, COLOR["text"])
    surface.blit(score, (SCREEN_W - score.get_width() - 14, 12))
    if hud.combo > 1:
        combo = f_sm.render(f"x{hud.combo} combo", True, COLOR["combo"])
        surface.blit(combo, (SCREEN_W - combo.get_width() - 14, 38))


# ── Bars ──────────────────────────────────────────────────────────────────────

def draw_timer_bar(surface: pygame.Surface, fill: float, seconds: float | None) -> None:
    """Draw the survival bar below the header.

    Args:
        surface: Native-resolution game surface.
        fill:    Remaining time ratio in [0.0, 1.0].
        seconds: Remaining seconds to label, or None to hide the label
                 (zen mode has no meaningful limit).
    """
    y = HEADER_H
    pygame.draw.rect(surface, COLOR["panel_border"], (0, y, SCREEN_W, TIMER_BAR_H))
    color = COLOR["timer_low"] if fill < _LOW_TIME_FILL else COLOR["timer"]
    pygame.draw.rect(surface, color, (0, y, int(SCREEN_W * fill), TIMER_BAR_H))
    if seconds is not None:
        label = _font(FONT_SIZE_SM).render(f"{seconds:4.1f}s", True, COLOR["text"])
        surface.blit(label, (SCREEN_W - label.get_width() - 6, y + TIMER_BAR_H + 4))


def draw_round_bar(surface: pygame.Surface, fill: float) -> None:
    """Thin bar under the survival bar showing progress through the round."""
    y = HEADER_H + TIMER_BAR_H
    pygame.draw.rect(surface, COLOR["round"], (0, y, int(SCREEN_W * fill), ROUND_BAR_H))


# ── Word and input ────────────────────────────────────────────────────────────

def draw_word(surface: pygame.Surface, word: str, check: InputCheck | None, y: int) -> None:
    """Draw the target word, tinting the matched prefix and the first error.

    Args:
        surface: Native game surface.
        word:    Target word.
        check:   Latest InputCheck for this word, or None before typing.
        y:       Top of the word line.
    """
    font = _font(FONT_SIZE_XL, bold=True)
    matched = check.match_length if check else 0
    error_at = check.error_index if check and check.is_error else -1

    glyphs = []
    for i, char in enumerate(word):
        if i < matched:
            color = COLOR["match"]
        elif i == error_at:
            color = COLOR["error"]
        else:
            color = COLOR["text"]
        glyphs.append(font.render(char, True, color))

    total_w = sum(g.get_width() for g in glyphs)
    x = SCREEN_W // 2 - total_w // 2
    for glyph in glyphs:
        surface.blit(glyph, (x, y))
        x += glyph.get_width()


def draw_input(surface: pygame.Surface, typed: str, is_error: bool, y: int) -> None:
    """Draw the input box with the player's current buffer and a caret."""
    x = (SCREEN_W - INPUT_BOX_W) // 2
    border = COLOR["error"] if is_error else COLOR["panel_border"]
    pygame.draw.rect(surface, COLOR["panel"], (x, y, INPUT_BOX_W, INPUT_BOX_H))
    pygame.draw.rect(surface, border, (x, y, INPUT_BOX_W, INPUT_BOX_H), 2)

    font = _font(FONT_SIZE_LG)
    text = font.render(typed + "_", True, COLOR["text"])
    surface.blit(text, (x + 12, y + (INPUT_BOX_H - text.get_height()) // 2))


# ── Mascot ────────────────────────────────────────────────────────────────────

def draw_mascot(surface: pygame.Surface, mood: str, cx: int, cy: int) -> None:
    """Draw the terminal-cursor mascot reacting to the last keystroke.

    Args:
        mood: "idle", "typing", or "error".
    """
    r = 28
    body = COLOR["error"] if mood == "error" else COLOR["panel_border"]
    pygame.draw.rect(surface, body, (cx - r, cy - r, r * 2, r * 2), border_radius=8)

    eye_y = cy - 6
    if mood == "error":
        for ex in (cx - 10, cx + 10):
            pygame.draw.line(surface, COLOR["text"], (ex - 4, eye_y - 4), (ex + 4, eye_y + 4), 2)
            pygame.draw.line(surface, COLOR["text"], (ex - 4, eye_y + 4), (ex + 4, eye_y - 4), 2)
    else:
        eye_h = 2 if mood == "typing" else 8
        for ex in (cx - 10, cx + 10):
            pygame.draw.rect(surface, COLOR["text"], (ex - 3, eye_y - eye_h // 2, 6, eye_h))

    mouth_w = 18 if mood == "typing" else 10
    pygame.draw.line(surface, COLOR["text"], (cx - mouth_w // 2, cy + 12), (cx + mouth_w // 2, cy + 12), 2)


# ── Screens ───────────────────────────────────────────────────────────────────

def draw_playing(surface: pygame.Surface, view: HudView, typed: str) -> None:
    """Draw the whole in-game screen from the view state."""
    seconds = None
    if view.hud is not None:
        draw_header(surface, view.hud)
        if view.hud.mode != "zen":
            seconds = view.timer.time if view.timer else view.hud.time
    draw_timer_bar(surface, view.time_fill(), seconds)
    if view.hud is not None and view.hud.mode == "normal":
        draw_round_bar(surface, view.round_fill())

    draw_mascot(surface, view.mood, SCREEN_W // 2, 190)
    draw_word(surface, view.word, view.check, 270)
    draw_input(surface, typed, bool(view.check and view.check.is_error), 350)


def draw_menu(surface: pygame.Surface, total_score: int) -> None:
    """Draw the title screen with the mode picker."""
    f_title = _font(FONT_SIZE_XL, bold=True)
    f_md = _font(FONT_SIZE_MD)
    f_sm = _font(FONT_SIZE_SM)

    _blit_centered(surface, f_title.render("TYPErun", True, COLOR["text"]), 150)
    _blit_centered(surface, f_sm.render("type the jargon before the clock runs dry", True, COLOR["text_dim"]), 210)

    options = (
        ("1", "NORMAL", "10 rounds, faster every tier"),
        ("2", "ZEN",    "no clock, just words"),
        ("3", "CHAOS",  "30s, fast drain, typo'd words"),
    )
    y = 290
    for key, name, blurb in options:
        line = f_md.render(f"[{key}] {name}", True, COLOR["text"])
        surface.blit(line, (120, y))
        surface.blit(f_sm.render(blurb, True, COLOR["text_dim"]), (120, y + 22))
        y += 60

    if total_score:
        _blit_centered(surface, f_sm.render(f"Session total: {total_score}", True, COLOR["combo"]), SCREEN_H - 80)


def draw_game_end(surface: pygame.Surface, result: str, score: int, total_score: int) -> None:
    """Draw the game over / win overlay.

    Args:
        result:      "over" or "win".
        score:       Final score of this game.
        total_score: Running total across games this session.
    """
    overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    overlay.fill((10, 10, 12, 210))
    surface.blit(overlay, (0, 0))

    f_lg = _font(FONT_SIZE_XL, bold=True)
    f_md = _font(FONT_SIZE_MD)
    f_sm = _font(FONT_SIZE_SM)

    if result == "win":
        title = f_lg.render("ALL ROUNDS CLEAR", True, COLOR["win"])
    else:
        title = f_lg.render("TIME OUT", True, COLOR["error"])
    _blit_centered(surface, title, 200)
    _blit_centered(surface, f_md.render(f"Score: {score}", True, COLOR["text"]), 270)
    _blit_centered(surface, f_sm.render(f"Session total: {total_score}", True, COLOR["text_dim"]), 298)
    _blit_centered(surface, f_md.render("[Enter] menu", True, COLOR["text"]), 360)
