from __future__ import annotations

import pytest

from conftest import make_quiz
from quizcode.core.errors import InvalidTransitionError
from quizcode.core.models import Participant
from quizcode.core.services.participation import (
    ParticipationStatus,
    activate,
    initial_state,
    select_option,
    tick,
)
from quizcode.core.services.scoring import score_participant


def test_initial_state_is_waiting():
    state = initial_state()
    assert state.status is ParticipationStatus.WAITING
    assert not state.accepts_input
    assert state.current_question(make_quiz()) is None


def test_activate_seeds_countdown_from_first_question():
    quiz = make_quiz(time_limit_seconds=20)
    state = activate(initial_state(), quiz)
    assert state.status is ParticipationStatus.ACTIVE
    assert state.current_question_index == 0
    assert state.time_remaining == 20
    assert state.accepts_input


def test_activate_twice_is_rejected(quiz):
    state = activate(initial_state(), quiz)
    with pytest.raises(InvalidTransitionError):
        activate(state, quiz)


def test_ticks_are_ignored_while_waiting(quiz):
    assert tick(initial_state(), quiz, 50) == initial_state()


def test_negative_elapsed_time_is_rejected(quiz):
    with pytest.raises(ValueError):
        tick(activate(initial_state(), quiz), quiz, -1)


def test_select_records_time_to_answer_and_starts_reveal(quiz):
    state = tick(activate(initial_state(), quiz), quiz, 4)
    state, answer = select_option(state, quiz, "q1-B", "p1")
    assert answer is not None
    assert answer.time_to_answer == 4
    assert answer.participant_id == "p1"
    assert state.revealing
    assert state.reveal_remaining == 3
    assert state.selected_option_id == "q1-B"
    assert not state.accepts_input


def test_second_selection_during_reveal_has_no_effect(quiz):
    state = activate(initial_state(), quiz)
    state, _ = select_option(state, quiz, "q1-A")
    again, answer = select_option(state, quiz, "q1-B")
    assert answer is None
    assert again == state
    assert len(state.answers) == 1


def test_unknown_option_is_rejected(quiz):
    state = activate(initial_state(), quiz)
    with pytest.raises(ValueError):
        select_option(state, quiz, "q2-B")


def test_reveal_then_next_question_with_fresh_countdown(quiz):
    state = activate(initial_state(), quiz)
    state, _ = select_option(state, quiz, "q1-B")
    state = tick(state, quiz, 2)
    assert state.revealing and state.current_question_index == 0
    state = tick(state, quiz)
    assert not state.revealing
    assert state.current_question_index == 1
    assert state.time_remaining == 30
    assert state.selected_option_id is None


def test_timeout_enters_reveal_without_answer(quiz):
    state = tick(activate(initial_state(), quiz), quiz, 30)
    assert state.revealing
    assert state.time_remaining == 0
    assert state.answers == ()
    _, answer = select_option(state, quiz, "q1-B")
    assert answer is None


def test_completed_state_ignores_further_ticks(quiz):
    state = tick(activate(initial_state(), quiz), quiz, 2 * (30 + 3))
    assert state.is_completed
    assert tick(state, quiz, 10) == state


def test_one_answer_then_wrong_answer_scores_half():
    quiz = make_quiz()
    state = activate(initial_state(), quiz)
    state = tick(state, quiz, 5)
    state, _ = select_option(state, quiz, "q1-B", "p1")
    state = tick(state, quiz, 3)
    state = tick(state, quiz, 8)
    state, _ = select_option(state, quiz, "q2-C", "p1")
    state = tick(state, quiz, 3)
    assert state.is_completed

    result = score_participant(
        quiz, Participant(id="p1", quiz_id=quiz.id, display_name="Ann", answers=list(state.answers))
    )
    assert result.score == 50.0
    assert result.total_time == 13


def test_timing_out_on_every_question_scores_zero():
    quiz = make_quiz()
    state = activate(initial_state(), quiz)
    for _ in quiz.questions:
        state = tick(state, quiz, 30)
        state = tick(state, quiz, 3)
    assert state.is_completed
    assert state.answers == ()

    result = score_participant(quiz, Participant(id="p1", quiz_id=quiz.id, display_name="Ann"))
    assert result.score == 0.0
    assert result.total_time == 0
