"""
Tests for the opening dice rolls that decide the turn order.
"""

import pytest

from conftest import ScriptedRandom, is_waiting
from trivia.config import GameConfig
from trivia.events import EventType
from trivia.game import TurnPhase, create_game
from trivia.player import Player


def players(n):
    return [Player(i, f"P{i}") for i in range(n)]


def final_order(game):
    event = game.event_log.of_type(EventType.STARTING_ORDER)[-1]
    return event.details["order"], event.details["rolls"]


def test_starting_order_runs_before_first_turn(scheduler):
    game = create_game(GameConfig(seed=1), players(2), scheduler=scheduler)

    assert game.state.phase == TurnPhase.STARTING_ORDER
    assert game.state.starting_order.active
    game.roll_dice()
    assert game.event_log.of_type(EventType.DICE_ROLL) == []

    assert scheduler.run_until(lambda: is_waiting(game))
    assert not game.state.starting_order.active
    assert game.state.can_roll_dice


def test_rolls_are_revealed_one_player_at_a_time(scheduler):
    game = create_game(GameConfig(seed=1), players(3), scheduler=scheduler, rng=ScriptedRandom([2, 6, 4]))
    seen = []
    game.add_listener(lambda g: seen.append(g.state.starting_order.rolling_player_id))

    scheduler.run_until(lambda: is_waiting(game))

    assert [pid for pid in seen if pid is not None][:3] == [0, 1, 2]
    assert [p.player_id for p in game.players] == [1, 2, 0]
    assert game.get_current_player().player_id == 1


def test_only_tied_players_roll_again(scheduler):
    rng = ScriptedRandom([4, 4, 2, 5, 3])
    game = create_game(GameConfig(), players(3), scheduler=scheduler, rng=rng)

    scheduler.run_until(lambda: is_waiting(game))

    rolls = game.event_log.of_type(EventType.STARTING_ROLL)
    per_player = {pid: [e.details["value"] for e in rolls if e.player_id == pid] for pid in range(3)}
    assert per_player == {0: [4, 5], 1: [4, 3], 2: [2]}
    assert game.event_log.of_type(EventType.STARTING_TIE)[0].details["player_ids"] == [0, 1]
    assert [p.player_id for p in game.players] == [0, 1, 2]


def test_repeated_ties_keep_rolling(scheduler):
    rng = ScriptedRandom([3, 3, 1, 1, 6, 2])
    game = create_game(GameConfig(), players(2), scheduler=scheduler, rng=rng)

    scheduler.run_until(lambda: is_waiting(game))

    assert len(game.event_log.of_type(EventType.STARTING_TIE)) == 2
    order, rolls = final_order(game)
    assert order == [0, 1]
    assert rolls == {0: 6, 1: 2}


def test_two_separate_tie_groups(scheduler):
    rng = ScriptedRandom([5, 2, 5, 2, 6, 1, 4, 3])
    game = create_game(GameConfig(), players(4), scheduler=scheduler, rng=rng)

    scheduler.run_until(lambda: is_waiting(game))

    order, rolls = final_order(game)
    assert rolls == {0: 6, 1: 1, 2: 4, 3: 3}
    assert order == [0, 2, 3, 1]


@pytest.mark.parametrize("count", [2, 3, 4])
@pytest.mark.parametrize("seed", range(15))
def test_starting_order_is_strictly_descending(scheduler, count, seed):
    game = create_game(GameConfig(seed=seed), players(count), scheduler=scheduler)

    assert scheduler.run_until(lambda: is_waiting(game))

    order, rolls = final_order(game)
    values = [rolls[pid] for pid in order]
    assert values == sorted(values, reverse=True)
    assert len(set(values)) == count
    assert [p.player_id for p in game.players] == order
