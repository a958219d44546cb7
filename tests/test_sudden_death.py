"""
Tests for the sudden-death tie-break state machine.
"""

import random

import pytest

from conftest import make_question, make_questions
from trivia.player import PlayerState
from trivia.questions import Difficulty, QuestionPool
from trivia.sudden_death import RoundStep, SuddenDeath


def contenders(n):
    return [PlayerState(i, f"P{i}") for i in range(n)]


def duel_for(n, questions=None, seed=0):
    pool = QuestionPool(make_questions() if questions is None else questions, random.Random(seed))
    return SuddenDeath(contenders(n), pool)


def play_round(duel, results):
    """Answer the round's question with the given results, one per contender."""
    steps = []
    for correct in results:
        assert duel.round_question() is not None
        duel.record(duel.current.player_id, correct)
        steps.append(duel.advance())
    return steps


def test_needs_two_contenders():
    with pytest.raises(ValueError):
        duel_for(1)


def test_single_correct_answer_wins():
    duel = duel_for(2)
    steps = play_round(duel, [False, True])

    assert steps == [RoundStep.NEXT_CONTENDER, RoundStep.RESOLVED]
    assert duel.winner.player_id == 1
    assert duel.state().active is False
    assert duel.state().winner_id == 1


def test_nobody_correct_repeats_round_with_same_contenders():
    duel = duel_for(3)
    first_question = duel.round_question()

    steps = play_round(duel, [False, False, False])

    assert steps[-1] == RoundStep.NEXT_ROUND
    assert duel.round == 2
    assert [p.player_id for p in duel.contenders] == [0, 1, 2]
    assert duel.index == 0
    assert duel.answers == {}
    assert duel.round_question() is not first_question


def test_several_correct_answers_narrow_the_field():
    duel = duel_for(4)
    play_round(duel, [True, False, True, False])

    assert [p.player_id for p in duel.contenders] == [0, 2]
    assert duel.round == 2

    steps = play_round(duel, [False, True])
    assert steps[-1] == RoundStep.RESOLVED
    assert duel.winner.player_id == 2
    assert duel.contender_counts == [4, 2]


def test_all_contenders_share_the_round_question():
    duel = duel_for(3)
    question = duel.round_question()
    duel.record(0, False)
    duel.advance()
    assert duel.round_question() is question
    assert duel.current.player_id == 1


def test_hard_questions_preferred():
    easy = make_question(1, difficulty=Difficulty.EASY)
    hard = make_question(2, difficulty=Difficulty.HARD)
    duel = duel_for(2, questions=[easy, hard])
    assert duel.round_question() is hard


def test_no_question_at_all_first_contender_wins():
    duel = duel_for(3, questions=[])
    assert duel.round_question() is None
    assert duel.is_resolved
    assert duel.winner.player_id == 0
    assert duel.advance() == RoundStep.RESOLVED


@pytest.mark.parametrize("seed", range(25))
def test_duel_terminates_with_non_increasing_field(seed):
    rng = random.Random(seed)
    duel = duel_for(rng.randint(2, 4), seed=seed)

    for _ in range(500):
        if duel.is_resolved:
            break
        play_round(duel, [rng.random() < 0.5 for _ in duel.contenders])

    assert duel.is_resolved
    counts = duel.contender_counts
    assert all(a >= b for a, b in zip(counts, counts[1:]))
    assert duel.winner in duel.contenders
