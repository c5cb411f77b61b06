from __future__ import annotations

import random

import pytest

from core.engine import InputAction
from core.events import (
    GameOver, GameStart, GameWin, HudUpdate, InputCheck, NewWord, RoundChange, TimerUpdate,
)
from core.modes import Mode


# ── Lifecycle ─────────────────────────────────────────────────────────────────

def test_init_defers_the_first_hud(make_engine, record) -> None:
    engine = make_engine()
    engine.init()
    rec = record(engine.bus)
    assert rec.events == []

    engine.scheduler.advance(0)
    [hud] = rec.events
    assert isinstance(hud, HudUpdate)
    assert hud.payload() == {
        "score": 0, "totalScore": 0, "combo": 0, "round": 1,
        "totalRounds": 10, "mode": "normal", "time": 60.0,
    }


@pytest.mark.parametrize(("mode", "max_time"), [("normal", 60.0), ("chaos", 30.0), ("zen", 999.0)])
def test_reset_fills_time_for_mode(engine, mode: str, max_time: float) -> None:
    engine.reset_game(mode)
    assert engine.mode is Mode(mode)
    assert engine.current_time == engine.max_time == max_time
    assert not engine.is_playing
    assert not engine.ticking


def test_start_game_picks_word_and_starts_tick(engine, recorder) -> None:
    engine.start_game("normal")
    assert engine.is_playing
    assert engine.ticking
    assert engine.current_word == "grep"
    assert recorder.names() == ["new-word", "game-start"]
    assert recorder.of(GameStart)[0].mode == "normal"


def test_unknown_mode_is_rejected_without_touching_state(engine) -> None:
    engine.start_game("chaos")
    with pytest.raises(ValueError):
        engine.reset_game("hardcore")
    assert engine.mode is Mode.CHAOS
    assert engine.is_playing and engine.ticking


def test_only_one_tick_is_ever_live(engine) -> None:
    engine.start_game("normal")
    engine.start_game("normal")
    engine.start_game()
    assert engine.scheduler.pending() == 1

    engine.scheduler.advance(1.0)
    assert engine.current_time == 59.0


def test_reset_stops_a_running_game(engine, recorder) -> None:
    engine.start_game("normal")
    engine.reset_game("zen")
    assert not engine.ticking
    recorder.clear()
    engine.scheduler.advance(5.0)
    # only the deferred HUDs from the two resets, no ticks
    assert set(recorder.names()) == {"update-hud"}
    assert recorder.of(HudUpdate)[-1].mode == "zen"


def test_total_score_survives_reset(engine) -> None:
    engine.start_game("normal")
    engine.validate_input("grep")
    engine.reset_game("chaos")
    assert engine.score == 0
    assert engine.total_score == 10
    assert engine.hud_state().total_score == 10


# ── Tick loop ─────────────────────────────────────────────────────────────────

def test_tick_emits_timer_update(engine, recorder) -> None:
    engine.start_game("normal")
    engine.scheduler.advance(0.1)
    [update] = recorder.of(TimerUpdate)
    assert update.payload() == {"time": 59.9, "max": 60.0, "roundProgress": 0.5}


def test_tick_is_a_no_op_while_idle(engine, recorder) -> None:
    engine.reset_game("normal")
    recorder.clear()
    engine.tick()
    assert recorder.events == []
    assert engine.current_time == 60.0


def test_normal_round_advances_once_after_twenty_seconds(engine, recorder) -> None:
    engine.start_game("normal")
    engine.scheduler.advance(19.9)
    assert engine.round == 1

    engine.scheduler.advance(0.1)
    assert engine.round == 2
    assert engine.round_duration == 0.0
    # 200 ticks of 0.1 drained 20s, the round heals 10s
    assert engine.current_time == 50.0
    assert [e.round for e in recorder.of(RoundChange)] == [2]
    assert recorder.of(TimerUpdate)[-1].round_progress == 0.0


def test_round_heal_is_clamped(engine) -> None:
    engine.start_game("normal")
    engine.session.round_ticks = 199
    engine.tick()
    assert engine.round == 2
    assert engine.current_time == 60.0


def test_decay_speeds_up_in_later_rounds(engine) -> None:
    engine.start_game("normal")
    engine.session.round_num = 3
    engine.tick()
    assert engine.current_time == 59.85
    engine.session.round_num = 6
    engine.tick()
    assert engine.current_time == 59.6


def test_final_round_wins_instead_of_round_eleven(engine, recorder) -> None:
    engine.start_game("normal")
    engine.session.round_num = 10
    engine.session.round_ticks = 199
    engine.tick()

    assert engine.round == 10
    assert not engine.is_playing
    assert not engine.ticking
    assert recorder.of(RoundChange) == []
    [win] = recorder.of(GameWin)
    assert win.payload() == {"score": 0, "totalScore": 0}


def test_running_out_of_time_ends_the_game(engine, recorder) -> None:
    engine.start_game("normal")
    engine.scheduler.advance(0)
    engine.validate_input("grep")
    engine.clock.drain(59.95)
    engine.tick()

    assert engine.current_time == 0.0
    assert not engine.is_playing
    assert not engine.ticking
    [over] = recorder.of(GameOver)
    assert (over.score, over.total_score) == (10, 10)
    assert recorder.names()[-1] == "game-over"

    recorder.clear()
    engine.scheduler.advance(10.0)
    assert recorder.events == []


def test_chaos_drains_in_exactly_seventy_five_ticks(engine, recorder) -> None:
    engine.start_game("chaos")
    for _ in range(74):
        engine.tick()
    assert engine.is_playing
    assert engine.current_time == 0.4
    assert engine.round == 1

    engine.tick()
    assert not engine.is_playing
    assert len(recorder.of(GameOver)) == 1


def test_chaos_drains_in_seven_and_a_half_seconds(engine, recorder) -> None:
    engine.start_game("chaos")
    engine.scheduler.advance(7.4)
    assert recorder.of(GameOver) == []
    engine.scheduler.advance(0.1)
    assert len(recorder.of(GameOver)) == 1


def test_zen_never_ends(engine, recorder) -> None:
    engine.start_game("zen")
    engine.scheduler.advance(600.0)
    assert engine.is_playing
    assert engine.current_time == 999.0
    assert engine.round == 1
    assert recorder.of(GameOver) == []
    assert len(recorder.of(TimerUpdate)) == 6000


# ── Words ─────────────────────────────────────────────────────────────────────

def test_chaos_words_are_corrupted(make_engine, record) -> None:
    engine = make_engine(words=("docker",))
    rec = record(engine.bus)
    engine.start_game("chaos")
    assert engine.current_word != "docker"
    assert rec.of(NewWord)[0].word == engine.current_word


def test_normal_words_come_from_the_list(make_engine) -> None:
    words = ("helm", "kind", "exec")
    engine = make_engine(words=words)
    engine.start_game("normal")
    for _ in range(20):
        assert engine.current_word in words
        engine.validate_input(engine.current_word)


def test_empty_word_list_is_rejected(make_engine) -> None:
    with pytest.raises(ValueError):
        make_engine(words=())


# ── Input validation ──────────────────────────────────────────────────────────

def test_exact_then_wrong_keystroke(engine, recorder) -> None:
    engine.start_game("normal")
    assert engine.validate_input("grep") is InputAction.CLEAR
    assert (engine.score, engine.combo, engine.current_time) == (10, 1, 60.0)

    recorder.clear()
    assert engine.validate_input("x") is InputAction.CONTINUE
    assert engine.combo == 0
    assert engine.current_time == 59.0
    assert recorder.names() == ["mascot-error", "update-hud", "input-check"]
    assert recorder.of(InputCheck)[0].payload() == {
        "matchLength": 0, "isError": True, "errorIndex": 0, "inputLength": 1,
    }


def test_completion_emits_hud_then_feedback_then_word(engine, recorder) -> None:
    engine.start_game("normal")
    recorder.clear()
    engine.validate_input("grep")
    assert recorder.names() == ["update-hud", "mascot-typing", "new-word"]


def test_combo_scoring(engine) -> None:
    engine.start_game("normal")
    for _ in range(3):
        engine.validate_input("grep")
    assert engine.score == 10 + 12 + 14
    assert engine.combo == 3


def test_input_is_trimmed_and_lowercased(engine) -> None:
    engine.start_game("normal")
    assert engine.validate_input("  GrEp \n") is InputAction.CLEAR


def test_valid_prefix_reports_progress(engine, recorder) -> None:
    engine.start_game("normal")
    recorder.clear()
    assert engine.validate_input("gr") is InputAction.CONTINUE
    assert recorder.names() == ["mascot-typing", "input-check"]
    assert recorder.of(InputCheck)[0].payload() == {
        "matchLength": 2, "isError": False, "errorIndex": -1, "inputLength": 2,
    }
    assert engine.current_time == 60.0


@pytest.mark.parametrize(("typed", "index"), [("x", 0), ("gx", 1), ("grx", 2), ("grepx", 4)])
def test_mismatch_index(engine, recorder, typed: str, index: int) -> None:
    engine.start_game("normal")
    engine.validate_input(typed)
    check = recorder.of(InputCheck)[-1]
    assert check.is_error
    assert check.error_index == index
    assert check.match_length == index


def test_mismatch_without_combo_does_not_emit_hud(engine, recorder) -> None:
    engine.start_game("normal")
    recorder.clear()
    engine.validate_input("q")
    assert recorder.names() == ["mascot-error", "input-check"]


def test_arbitrarily_long_input_is_tolerated(engine, recorder) -> None:
    engine.start_game("normal")
    assert engine.validate_input("grep" + "p" * 100_000) is InputAction.CONTINUE
    assert recorder.of(InputCheck)[-1].input_length == 100_004


def test_penalty_clamps_but_never_ends_the_game(engine, recorder) -> None:
    engine.start_game("normal")
    engine.clock.drain(59.5)
    engine.validate_input("x")
    assert engine.current_time == 0.0
    assert engine.is_playing
    assert recorder.of(GameOver) == []

    engine.tick()
    assert not engine.is_playing


def test_zen_typos_cost_no_time(engine) -> None:
    engine.start_game("zen")
    engine.validate_input("grep")
    engine.validate_input("nope")
    assert engine.current_time == 999.0
    assert engine.combo == 0


def test_input_is_ignored_while_idle(engine, recorder) -> None:
    assert engine.validate_input("grep") is None
    engine.start_game("chaos")
    engine.clock.drain(30.0)
    engine.tick()
    recorder.clear()
    assert engine.validate_input("anything") is None
    assert recorder.events == []


# ── Healing ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(("round_num", "expected"), [(1, 52.0), (3, 51.5), (6, 50.8)])
def test_normal_heal_shrinks_with_round(engine, round_num: int, expected: float) -> None:
    engine.start_game("normal")
    engine.session.round_num = round_num
    engine.clock.drain(10.0)
    engine.validate_input("grep")
    assert engine.current_time == expected


def test_chaos_heal_is_flat_and_clamped(make_engine) -> None:
    engine = make_engine(words=("ls",))  # too short to corrupt
    engine.start_game("chaos")
    engine.clock.drain(5.0)
    engine.validate_input("ls")
    assert engine.current_time == 26.5
    engine.validate_input("ls")
    engine.validate_input("ls")
    engine.validate_input("ls")
    assert engine.current_time == 30.0


# ── Invariants ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("mode", ["normal", "chaos", "zen"])
def test_time_stays_within_bounds(make_engine, mode: str) -> None:
    engine = make_engine(words=("cache", "queue", "ls"), seed=7)
    moves = random.Random(7)
    engine.start_game(mode)

    for _ in range(4000):
        roll = moves.random()
        if roll < 0.7:
            engine.tick()
        elif roll < 0.8:
            engine.validate_input(engine.current_word)
        elif roll < 0.9:
            engine.validate_input("#")
        else:
            engine.validate_input(engine.current_word[:1])

        assert 0.0 <= engine.current_time <= engine.max_time
        assert 1 <= engine.round <= engine.total_rounds
        assert engine.combo >= 0 and engine.score >= 0
        assert engine.ticking == engine.is_playing

        if not engine.is_playing:
            engine.start_game(mode)


def test_hud_state_matches_engine(engine) -> None:
    engine.start_game("normal")
    engine.validate_input("grep")
    hud = engine.hud_state()
    assert (hud.score, hud.combo, hud.round, hud.mode, hud.time) == (10, 1, 1, "normal", 60.0)
