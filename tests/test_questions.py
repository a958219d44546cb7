"""
Tests for questions and the question pool.
"""

import random

import pytest

from conftest import make_question, make_questions
from trivia.exceptions import InvalidQuestionError
from trivia.questions import Difficulty, Question, QuestionPool, create_question_bank


def test_question_requires_four_options():
    with pytest.raises(InvalidQuestionError):
        Question("Too few?", ("a", "b", "c"), 0)


def test_question_rejects_bad_correct_index():
    with pytest.raises(InvalidQuestionError):
        Question("Out of range?", ("a", "b", "c", "d"), 4)


def test_question_options_are_stored_as_tuple():
    q = Question("List?", ["a", "b", "c", "d"], 2)
    assert q.options == ("a", "b", "c", "d")
    assert q.is_correct(2)
    assert not q.is_correct(0)


def test_standard_bank_is_valid():
    bank = create_question_bank()
    assert len(bank) >= 20
    assert all(len(q.options) == 4 for q in bank)
    assert any(q.is_bonus for q in bank)
    assert any(not q.is_bonus for q in bank)
    assert len({q.text for q in bank}) == len(bank)


def test_regular_draw_prefers_easy_non_bonus():
    hard = make_question(1, difficulty=Difficulty.HARD)
    easy = make_question(2, difficulty=Difficulty.EASY)
    bonus = make_question(3, bonus=True, difficulty=Difficulty.EASY)
    pool = QuestionPool([hard, easy, bonus], random.Random(1))

    assert pool.draw_regular() is easy
    assert pool.draw_regular() is hard
    # Only a bonus question left: regular tiles may still use it.
    assert pool.draw_regular() is bonus


def test_bonus_draw_prefers_hard_and_returns_none_when_empty():
    medium = make_question(1, bonus=True, difficulty=Difficulty.MEDIUM)
    hard = make_question(2, bonus=True, difficulty=Difficulty.HARD)
    regular = make_question(3)
    pool = QuestionPool([medium, hard, regular], random.Random(1), recycle=False)

    assert pool.draw_bonus() is hard
    assert pool.draw_bonus() is medium
    assert pool.draw_bonus() is None
    assert pool.available == [regular]


def test_draws_do_not_repeat_before_recycling():
    questions = make_questions(regular=6, bonus=0)
    pool = QuestionPool(questions, random.Random(7))

    drawn = [pool.draw_regular() for _ in range(6)]
    assert len(set(drawn)) == 6
    assert pool.recycle_count == 0
    assert pool.is_exhausted

    # The next draw refills the pool from used questions.
    again = pool.draw_regular()
    assert again in questions
    assert pool.recycle_count == 1
    assert len(pool.available) == 5
    assert pool.used == [again]


def test_pool_without_recycling_runs_dry():
    pool = QuestionPool(make_questions(regular=3, bonus=0), random.Random(3), recycle=False)

    assert all(pool.draw_regular() is not None for _ in range(3))
    assert pool.draw_regular() is None
    assert pool.is_exhausted
    assert pool.recycle_count == 0


def test_reset_restores_every_question():
    questions = make_questions(regular=3, bonus=1)
    pool = QuestionPool(questions, random.Random(3), recycle=False)
    pool.draw_regular()
    pool.draw_bonus()

    pool.reset()

    assert sorted(q.text for q in pool.available) == sorted(q.text for q in questions)
    assert pool.used == []


def test_sudden_death_draw_uses_master_list_and_prefers_hard():
    easy = make_question(1, difficulty=Difficulty.EASY)
    hard_a = make_question(2, difficulty=Difficulty.HARD)
    hard_b = make_question(3, difficulty=Difficulty.HARD)
    pool = QuestionPool([easy, hard_a, hard_b], random.Random(5), recycle=False)
    while pool.draw_regular() is not None:
        pass

    first = pool.draw_sudden_death()
    assert first in (hard_a, hard_b)
    second = pool.draw_sudden_death(exclude=[first])
    assert second in (hard_a, hard_b) and second is not first
    # Everything asked already: fall back to the easier question, then anything.
    assert pool.draw_sudden_death(exclude=[hard_a, hard_b]) is easy
    assert pool.draw_sudden_death(exclude=[easy, hard_a, hard_b]) in (hard_a, hard_b)
    assert pool.is_exhausted


def test_sudden_death_draw_without_questions():
    assert QuestionPool([], random.Random(0)).draw_sudden_death() is None
