"""
Tests for simulated players, the headless CLI and the JSONL game log.
"""

import json

import pytest

from conftest import make_question
from game_logger import GameLogger
from play_trivia import simulate_game
from trivia.agents import RandomAgent, SkilledAgent
from trivia.events import EventLog, EventType


def test_skilled_agent_accuracy_extremes():
    question = make_question(1)
    assert all(SkilledAgent(0, "A", accuracy=1.0, seed=s).choose_answer(question) == 0 for s in range(10))
    assert all(SkilledAgent(0, "A", accuracy=0.0, seed=s).choose_answer(question) != 0 for s in range(10))


def test_skilled_agent_rejects_bad_accuracy():
    with pytest.raises(ValueError):
        SkilledAgent(0, "A", accuracy=1.5)


def test_random_agent_picks_valid_option():
    agent = RandomAgent(0, "A", seed=3)
    picks = {agent.choose_answer(make_question(1)) for _ in range(50)}
    assert picks <= {0, 1, 2, 3}
    assert len(picks) > 1


@pytest.mark.parametrize("players", [2, 3, 4])
def test_simulated_turn_game_finishes(players):
    game = simulate_game(num_players=players, mode="turns", max_turns=10, seed=players, verbose=False)

    assert game.state.is_game_ended
    assert game.state.winner_id in {p.player_id for p in game.players}
    assert game.state.current_turn == 10
    assert len(game.event_log.of_type(EventType.GAME_END)) == 1


def test_simulated_question_game_uses_up_the_pool():
    game = simulate_game(num_players=2, mode="questions", seed=9, accuracy=None, verbose=False)

    assert game.state.is_game_ended
    assert game.pool.is_exhausted
    assert game.pool.recycle_count == 0


def test_simulation_is_reproducible():
    first = simulate_game(num_players=3, seed=21, verbose=False)
    second = simulate_game(num_players=3, seed=21, verbose=False)

    assert first.state.winner_id == second.state.winner_id
    assert [p.score for p in first.players] == [p.score for p in second.players]


def test_simulation_writes_jsonl_log(tmp_path):
    log_file = tmp_path / "game.jsonl"
    game = simulate_game(num_players=2, seed=4, verbose=False, log_file=str(log_file))

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert len(lines) == len(game.event_log.events)
    assert lines[0]["event_type"] == "game_start"
    assert lines[-1]["event_type"] == "game_end"
    assert [line["event_id"] for line in lines] == list(range(len(lines)))
    rolls = [line for line in lines if line["event_type"] == "dice_roll"]
    assert rolls and all("player_name" in line for line in rolls)


def test_game_logger_flush_is_incremental(basic_game, tmp_path):
    logger = GameLogger(str(tmp_path / "log.jsonl"))

    written = logger.flush_engine_events(basic_game)
    assert written == len(basic_game.event_log.events)
    assert logger.flush_engine_events(basic_game) == 0

    basic_game.force_move(0, 1)
    assert logger.flush_engine_events(basic_game) > 0


def test_event_log_since_returns_the_tail():
    log = EventLog()
    log.log(EventType.GAME_START)
    log.log(EventType.TURN_START, player_id=0, turn=1)
    log.log(EventType.DICE_ROLL, player_id=0, value=4)

    assert [e.event_type for e in log.since(1)] == [EventType.TURN_START, EventType.DICE_ROLL]
    assert log.since(3) == []
    assert len(log.since(-5)) == 3
