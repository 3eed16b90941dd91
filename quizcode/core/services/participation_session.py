"""Service binding one participant's state machine to the Catalog Store."""

from __future__ import annotations

import logging

from quizcode.core.errors import (
    DuplicateParticipantError,
    InvalidTransitionError,
    NotAuthenticatedError,
    QuizError,
)
from quizcode.core.models import ParticipantAnswer, Quiz, QuizQuestion
from quizcode.core.services import participation
from quizcode.core.services.catalog_store import CatalogStore
from quizcode.core.services.identity import IdentityProvider
from quizcode.core.services.participation import ParticipationState, ParticipationStatus

logger = logging.getLogger(__name__)


class ParticipationSession:
    """Manages the state of a single participant taking a quiz."""

    def __init__(self, quiz: Quiz, store: CatalogStore, identity: IdentityProvider) -> None:
        self._quiz = quiz
        self._store = store
        self._identity = identity
        self._state: ParticipationState = participation.initial_state()
        self._participant_id: str | None = None
        self._display_name: str | None = identity.get_current_identity()

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def state(self) -> ParticipationState:
        return self._state

    @property
    def participant_id(self) -> str | None:
        return self._participant_id

    @property
    def display_name(self) -> str | None:
        return self._display_name

    def get_current_question(self) -> QuizQuestion | None:
        return self._state.current_question(self._quiz)

    def is_completed(self) -> bool:
        return self._state.is_completed

    def start(self) -> ParticipationState:
        """Register the participant and start the first question.

        On any failure the session stays ``waiting`` and the error propagates.
        """
        if self._state.status is not ParticipationStatus.WAITING:
            raise InvalidTransitionError("This quiz session has already started.")
        display_name = self._identity.get_current_identity()
        if not display_name:
            raise NotAuthenticatedError("Sign in before starting the quiz.")

        try:
            participant_id = self._store.create_participant(self._quiz.id, display_name)
        except DuplicateParticipantError:
            logger.info("%s tried to join quiz %s twice", display_name, self._quiz.id)
            raise
        except QuizError:
            logger.exception("Could not register %s for quiz %s", display_name, self._quiz.id)
            raise

        self._participant_id = participant_id
        self._display_name = display_name
        self._state = participation.activate(self._state, self._quiz)
        logger.info("%s started quiz %s", display_name, self._quiz.id)
        return self._state

    def select_option(self, option_id: str) -> ParticipantAnswer | None:
        """Record an answer for the current question.

        Returns None when the selection is ignored (reveal running, already
        answered, not active). If the store rejects the write the state is
        left untouched so the participant can try again.
        """
        new_state, answer = participation.select_option(
            self._state, self._quiz, option_id, self._participant_id or ""
        )
        if answer is None:
            return None
        try:
            self._store.create_answer(
                answer.participant_id,
                answer.question_id,
                answer.option_id,
                answer.time_to_answer,
            )
        except QuizError:
            logger.exception(
                "Could not record answer of %s for question %s", self._display_name, answer.question_id
            )
            raise
        self._state = new_state
        return answer

    def tick(self, elapsed_seconds: int = 1) -> ParticipationState:
        was_completed = self._state.is_completed
        self._state = participation.tick(self._state, self._quiz, elapsed_seconds)
        if self._state.is_completed and not was_completed:
            logger.info("%s completed quiz %s", self._display_name, self._quiz.id)
        return self._state
