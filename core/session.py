"""
core/session.py — Score, combo, and round state for TYPErun.

Session tracks the mutable game data that the HUD shows:
    - Per-game score and the process-lifetime total score
    - Combo (consecutive completed words, broken by any typo)
    - Round number and ticks survived in the current round

Session does NOT own the survival clock, the current word, or the tick
handle. It is a data container with transition methods; engine.py is
the sole caller.

Round time is counted in whole ticks. round_duration() converts to
seconds, so 200 ticks of 0.1s is exactly one 20s round regardless of
how frame deltas were sliced.

Usage:
    session = Session()
    session.reset()

    # on a completed word:
    points = session.register_word()

    # on a wrong keystroke:
    session.break_combo()

    # each normal-mode tick:
    if session.tick_round():
        # round time is up, engine advances the round
"""

from settings import (
    BASE_POINTS, COMBO_BONUS,
    TOTAL_ROUNDS, ROUND_DURATION_S, TICK_S,
)

_TICKS_PER_ROUND = round(ROUND_DURATION_S / TICK_S)


class Session:
    """Mutable scoring state for one game, plus the running total.

    Attributes:
        score:        Points earned this game.
        total_score:  Points earned across every game since construction.
                      Not cleared by reset().
        combo:        Consecutive completed words. Resets to 0 on any typo.
        round_num:    Current round, 1-based, at most TOTAL_ROUNDS.
        round_ticks:  Ticks survived in the current round.
    """

    def __init__(self) -> None:
        self.score:       int = 0
        self.total_score: int = 0
        self.combo:       int = 0
        self.round_num:   int = 1
        self.round_ticks: int = 0

    def reset(self) -> None:
        """Clear per-game state. total_score carries over."""
        self.score       = 0
        self.combo       = 0
        self.round_num   = 1
        self.round_ticks = 0

    # ── Scoring ───────────────────────────────────────────────────────────────

    def register_word(self) -> int:
        """Award points for a completed word and extend the combo.

        Points = BASE_POINTS + combo * COMBO_BONUS, using the combo value
        before this word is counted, so the first word of a streak is
        always worth BASE_POINTS.

        Returns:
            The points awarded.
        """
        points = BASE_POINTS + self.combo * COMBO_BONUS
        self.score       += points
        self.total_score += points
        self.combo       += 1
        return points

    def break_combo(self) -> bool:
        """Reset the combo.

        Returns:
            True if there was a combo to break.
        """
        if self.combo == 0:
            return False
        self.combo = 0
        return True

    # ── Rounds ────────────────────────────────────────────────────────────────

    def tick_round(self) -> bool:
        """Count one tick toward the current round.

        Returns:
            True once the round's full duration has elapsed.
        """
        self.round_ticks += 1
        return self.round_ticks >= _TICKS_PER_ROUND

    def is_final_round(self) -> bool:
        return self.round_num >= TOTAL_ROUNDS

    def next_round(self) -> None:
        """Move to the following round and restart its clock."""
        self.round_num   = min(TOTAL_ROUNDS, self.round_num + 1)
        self.round_ticks = 0

    def round_duration(self) -> float:
        """Seconds elapsed in the current round."""
        return self.round_ticks * TICK_S

    def round_progress(self) -> float:
        """Percentage of the current round elapsed, 0-100."""
        return self.round_ticks / _TICKS_PER_ROUND * 100
