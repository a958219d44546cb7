"""
Tests for game configuration, settings and game setup validation.
"""

import logging

import pytest

from trivia.config import GameConfig, GameMode, Timings
from trivia.exceptions import InvalidSetupError
from trivia.game import TurnPhase, create_game
from trivia.player import Player
from trivia.settings import TriviaSettings


@pytest.mark.parametrize("requested,expected", [(10, 10), (15, 15), (20, 20), (12, 10), (None, 10), (0, 10)])
def test_turn_count_falls_back_to_default(requested, expected):
    assert GameConfig(max_turns=requested).resolved_max_turns() == expected


def test_game_uses_resolved_turn_count(scheduler, two_players):
    game = create_game(GameConfig(max_turns=7), two_players, scheduler=scheduler)
    assert game.state.max_turns == 10
    assert game.state.game_mode == GameMode.TURN_BASED


@pytest.mark.parametrize("count", [0, 1, 5])
def test_player_count_must_be_two_to_four(scheduler, count):
    players = [Player(i, f"P{i}") for i in range(count)]
    with pytest.raises(InvalidSetupError):
        create_game(GameConfig(), players, scheduler=scheduler)


def test_player_ids_must_be_unique(scheduler):
    with pytest.raises(InvalidSetupError):
        create_game(GameConfig(), [Player(1, "A"), Player(1, "B")], scheduler=scheduler)


def test_invalid_setup_is_a_value_error(scheduler):
    with pytest.raises(ValueError):
        create_game(GameConfig(), [Player(0, "Solo")], scheduler=scheduler)


def test_players_start_with_initial_score(scheduler, four_players):
    game = create_game(GameConfig(initial_score=25), four_players, scheduler=scheduler)
    assert [p.score for p in game.players] == [25, 25, 25, 25]
    assert game.state.phase == TurnPhase.STARTING_ORDER


def test_timings_scale_every_delay():
    timings = Timings().scaled(0.5)
    assert timings.move_step == pytest.approx(0.1)
    assert timings.sudden_death_round == pytest.approx(1.0)
    assert timings.dice_ticks == Timings().dice_ticks


def test_settings_build_timings():
    settings = TriviaSettings(watchdog_ms=250, animation_speed=0.0)
    timings = settings.build_timings()
    assert timings.watchdog == pytest.approx(0.25)
    assert timings.landing_pause == 0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("TRIVIA_WATCHDOG_MS", "800")
    monkeypatch.setenv("TRIVIA_LOG_LEVEL", "debug")
    settings = TriviaSettings()
    assert settings.watchdog_ms == 800
    assert settings.log_level == "DEBUG"


def test_unknown_log_level_falls_back_to_info():
    assert TriviaSettings(log_level="chatty").log_level == "INFO"


def test_configure_logging_uses_settings_level(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    TriviaSettings(log_level="warning").configure_logging()
    assert calls[0]["level"] == "WARNING"
