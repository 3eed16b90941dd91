from __future__ import annotations

import logging

import pytest

from quizcode.core.errors import (
    DuplicateParticipantError,
    InvalidTransitionError,
    NotAuthenticatedError,
    StoreError,
)
from quizcode.core.models import QuizStatus
from quizcode.core.services.identity import StaticIdentity
from quizcode.core.services.participation import ParticipationStatus
from quizcode.core.services.participation_session import ParticipationSession


@pytest.fixture
def stored_quiz(store):
    quiz_id = store.create_quiz("Capitals", "", QuizStatus.PUBLISHED, "ABC234", "host")
    for order in range(2):
        question_id = store.create_question(quiz_id, f"Question {order + 1}", 30, order)
        store.create_option(question_id, "A", False, 0)
        store.create_option(question_id, "B", True, 1)
    return store.fetch_quiz(quiz_id)


class FailingAnswerStore:
    """Delegates to a real store but rejects every answer write."""

    def __init__(self, store):
        self._store = store

    def __getattr__(self, name):
        return getattr(self._store, name)

    def create_answer(self, *args, **kwargs):
        raise StoreError("connection lost")


def test_start_registers_participant_and_activates(store, stored_quiz):
    session = ParticipationSession(stored_quiz, store, StaticIdentity("Ann"))
    state = session.start()
    assert state.status is ParticipationStatus.ACTIVE
    assert session.participant_id is not None
    assert session.get_current_question().id == stored_quiz.questions[0].id
    (participant,) = store.fetch_participants_with_answers(stored_quiz.id)
    assert participant.display_name == "Ann"


def test_start_without_identity_is_rejected(store, stored_quiz):
    session = ParticipationSession(stored_quiz, store, StaticIdentity("  "))
    with pytest.raises(NotAuthenticatedError):
        session.start()
    assert session.state.status is ParticipationStatus.WAITING
    assert store.fetch_participants_with_answers(stored_quiz.id) == []


def test_second_join_by_same_identity_creates_no_row(store, stored_quiz, caplog):
    ParticipationSession(stored_quiz, store, StaticIdentity("Ann")).start()
    second = ParticipationSession(stored_quiz, store, StaticIdentity("Ann"))

    with caplog.at_level(logging.INFO):
        with pytest.raises(DuplicateParticipantError):
            second.start()

    assert second.state.status is ParticipationStatus.WAITING
    assert len(store.fetch_participants_with_answers(stored_quiz.id)) == 1
    assert "twice" in caplog.text


def test_start_twice_is_an_invalid_transition(store, stored_quiz):
    session = ParticipationSession(stored_quiz, store, StaticIdentity("Ann"))
    session.start()
    with pytest.raises(InvalidTransitionError):
        session.start()


def test_answer_is_persisted(store, stored_quiz):
    session = ParticipationSession(stored_quiz, store, StaticIdentity("Ann"))
    session.start()
    session.tick(6)
    question = stored_quiz.questions[0]
    answer = session.select_option(question.options[1].id)

    assert answer.time_to_answer == 6
    (participant,) = store.fetch_participants_with_answers(stored_quiz.id)
    assert participant.answers == [answer]


def test_second_selection_is_ignored(store, stored_quiz):
    session = ParticipationSession(stored_quiz, store, StaticIdentity("Ann"))
    session.start()
    options = stored_quiz.questions[0].options
    session.select_option(options[0].id)
    assert session.select_option(options[1].id) is None
    (participant,) = store.fetch_participants_with_answers(stored_quiz.id)
    assert len(participant.answers) == 1


def test_failed_answer_write_leaves_state_untouched(store, stored_quiz, caplog):
    session = ParticipationSession(stored_quiz, FailingAnswerStore(store), StaticIdentity("Ann"))
    session.start()
    before = session.state

    with pytest.raises(StoreError):
        session.select_option(stored_quiz.questions[0].options[1].id)

    assert session.state == before
    assert session.state.accepts_input
    assert "Could not record answer" in caplog.text


def test_session_completes_after_all_questions(store, stored_quiz, caplog):
    session = ParticipationSession(stored_quiz, store, StaticIdentity("Ann"))
    session.start()
    with caplog.at_level(logging.INFO):
        session.tick(2 * 33)
    assert session.is_completed()
    assert session.get_current_question() is None
    assert "completed quiz" in caplog.text
