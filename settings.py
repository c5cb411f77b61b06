"""
settings.py — Global constants for TYPErun.

All magic numbers live here. No other module should hardcode colors,
dimensions, or timing values. Import what you need with:
    from settings import COLOR, SCREEN_W, ...
"""

# ── Screen ────────────────────────────────────────────────────────────────────
SCREEN_W = 480
SCREEN_H = 640
FPS = 60
TITLE = "TYPErun"

# ── Colors ────────────────────────────────────────────────────────────────────
COLOR = {
    "background":   ( 18,  20,  26),   # #12141A
    "panel":        ( 34,  38,  48),   # #222630
    "panel_border": ( 70,  76,  92),   # #464C5C
    "timer":        ( 80, 200, 120),   # #50C878, healthy survival bar
    "timer_low":    (229,  57,  53),   # #E53935, under a quarter left
    "round":        ( 74, 144, 217),   # #4A90D9, round progress bar
    "text":         (230, 230, 230),
    "text_dim":     (130, 136, 150),
    "match":        ( 80, 200, 120),   # typed prefix that matches
    "error":        (234,  67,  53),   # first wrong character
    "combo":        (255, 200,   0),
    "win":          (255, 210, 140),
}

# ── Tick loop ─────────────────────────────────────────────────────────────────
TICK_S = 0.1                  # survival clock period in seconds
DT_CLAMP_S = 0.05             # max frame delta fed to the scheduler

# ── Rounds (normal mode only) ─────────────────────────────────────────────────
TOTAL_ROUNDS = 10
ROUND_DURATION_S = 20.0       # seconds survived to clear a round
ROUND_HEAL_S = 10.0           # time restored on round advance

# ── Survival time per mode ────────────────────────────────────────────────────
MAX_TIME = {
    "normal": 60.0,
    "chaos":  30.0,
    "zen":    999.0,          # displayed as "infinite"
}

# Decay per tick in normal mode, keyed by the last round of each tier.
# Easy (1-2), medium (3-5), hard (6-10).
NORMAL_DECAY = ((2, 0.1), (5, 0.15), (TOTAL_ROUNDS, 0.25))
NORMAL_HEAL  = ((2, 2.0), (5, 1.5),  (TOTAL_ROUNDS, 0.8))

CHAOS_DECAY = 0.4
CHAOS_HEAL  = 1.5

# ── Scoring ───────────────────────────────────────────────────────────────────
BASE_POINTS = 10
COMBO_BONUS = 2               # extra points per combo step
ERROR_PENALTY_S = 1.0         # time lost on a wrong keystroke

# ── Input ─────────────────────────────────────────────────────────────────────
# The UI caps the buffer; the engine tolerates any length.
MAX_INPUT_LEN = 12

# ── UI Layout ─────────────────────────────────────────────────────────────────
HEADER_H      = 72
TIMER_BAR_H   = 14
ROUND_BAR_H   = 6
INPUT_BOX_H   = 48
INPUT_BOX_W   = SCREEN_W - 96

# ── Fonts ─────────────────────────────────────────────────────────────────────
# pygame.font.SysFont name. Monospace so typed and target glyphs line up
FONT_FAMILY = "couriernew"
FONT_SIZE_XL = 44
FONT_SIZE_LG = 22
FONT_SIZE_MD = 16
FONT_SIZE_SM = 12
