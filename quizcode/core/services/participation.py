"""Pure state machine driving one participant through a quiz.

States move strictly forward: ``waiting -> active -> completed``. While
active, each question runs a countdown; selecting an option or running out
of time enters a fixed reveal interval, after which the next question starts
or the quiz completes.

Every function here takes a state and returns a new one. Time only moves
through `tick`, so callers decide where seconds come from (a Qt timer, a
request clock or a test).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from quizcode.constants.quiz_constants import REVEAL_DURATION_SECONDS
from quizcode.core.errors import InvalidTransitionError
from quizcode.core.models import ParticipantAnswer, Quiz, QuizQuestion


class ParticipationStatus(str, Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class ParticipationState:
    """Snapshot of a participant's progress through a quiz."""

    status: ParticipationStatus = ParticipationStatus.WAITING
    current_question_index: int = 0
    time_remaining: int = 0
    answers: tuple[ParticipantAnswer, ...] = ()
    selected_option_id: str | None = None
    revealing: bool = False
    reveal_remaining: int = 0

    @property
    def accepts_input(self) -> bool:
        return self.status is ParticipationStatus.ACTIVE and not self.revealing

    @property
    def is_completed(self) -> bool:
        return self.status is ParticipationStatus.COMPLETED

    def current_question(self, quiz: Quiz) -> QuizQuestion | None:
        if self.status is not ParticipationStatus.ACTIVE:
            return None
        return quiz.questions[self.current_question_index]

    def answer_for(self, question_id: str) -> ParticipantAnswer | None:
        return next((a for a in self.answers if a.question_id == question_id), None)


def initial_state() -> ParticipationState:
    return ParticipationState()


def activate(state: ParticipationState, quiz: Quiz) -> ParticipationState:
    """Start the first question. Only valid from ``waiting``."""
    if state.status is not ParticipationStatus.WAITING:
        raise InvalidTransitionError(f"Cannot start a quiz that is {state.status.value}.")
    if not quiz.questions:
        raise ValueError("Quiz has no questions.")
    return replace(
        state,
        status=ParticipationStatus.ACTIVE,
        current_question_index=0,
        time_remaining=quiz.questions[0].time_limit_seconds,
        selected_option_id=None,
        revealing=False,
        reveal_remaining=0,
    )


def select_option(
    state: ParticipationState,
    quiz: Quiz,
    option_id: str,
    participant_id: str = "",
) -> tuple[ParticipationState, ParticipantAnswer | None]:
    """Record an answer for the current question and start the reveal.

    Returns the state unchanged and ``None`` whenever input is not accepted,
    so a second selection for the same question has no effect.
    """
    if not state.accepts_input:
        return state, None
    question = quiz.questions[state.current_question_index]
    if state.answer_for(question.id) is not None:
        return state, None
    if question.find_option(option_id) is None:
        raise ValueError(f"Option {option_id} is not part of the current question.")

    answer = ParticipantAnswer(
        participant_id=participant_id,
        question_id=question.id,
        option_id=option_id,
        time_to_answer=question.time_limit_seconds - state.time_remaining,
    )
    new_state = replace(
        state,
        answers=state.answers + (answer,),
        selected_option_id=option_id,
        revealing=True,
        reveal_remaining=REVEAL_DURATION_SECONDS,
    )
    return new_state, answer


def tick(state: ParticipationState, quiz: Quiz, elapsed_seconds: int = 1) -> ParticipationState:
    """Advance the countdown and reveal timers by whole seconds."""
    if elapsed_seconds < 0:
        raise ValueError("Elapsed time cannot be negative.")
    for _ in range(elapsed_seconds):
        if state.status is not ParticipationStatus.ACTIVE:
            break
        state = _tick_once(state, quiz)
    return state


def _tick_once(state: ParticipationState, quiz: Quiz) -> ParticipationState:
    if state.revealing:
        remaining = state.reveal_remaining - 1
        if remaining > 0:
            return replace(state, reveal_remaining=remaining)
        return _advance(state, quiz)

    remaining = state.time_remaining - 1
    if remaining > 0:
        return replace(state, time_remaining=remaining)
    # Time ran out unanswered: no answer is recorded.
    return replace(
        state,
        time_remaining=0,
        revealing=True,
        reveal_remaining=REVEAL_DURATION_SECONDS,
    )


def _advance(state: ParticipationState, quiz: Quiz) -> ParticipationState:
    next_index = state.current_question_index + 1
    if next_index < len(quiz.questions):
        return replace(
            state,
            current_question_index=next_index,
            time_remaining=quiz.questions[next_index].time_limit_seconds,
            selected_option_id=None,
            revealing=False,
            reveal_remaining=0,
        )
    return replace(
        state,
        status=ParticipationStatus.COMPLETED,
        time_remaining=0,
        revealing=False,
        reveal_remaining=0,
    )
