"""Business logic for quiz authoring, participation and results shared between UI and API."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from threading import Lock
import time
from typing import Callable

from quizcode.constants.quiz_constants import MAX_SHARE_CODE_ATTEMPTS
from quizcode.core.errors import (
    DuplicateParticipantError,
    InvalidTransitionError,
    NotAuthenticatedError,
    QuizError,
    QuizNotFoundError,
    ShareCodeConflictError,
    StoreError,
)
from quizcode.core.models import ParticipantAnswer, Quiz, QuizStatus
from quizcode.core.results_exporter import serialize_results_csv
from quizcode.core.services.catalog_store import CatalogStore
from quizcode.core.services.identity import IdentityProvider
from quizcode.core.services.participation import ParticipationState, ParticipationStatus
from quizcode.core.services.participation_session import ParticipationSession
from quizcode.core.services.quiz_builder import QuizBuilder
from quizcode.core.services.scoring import ResultsReport, build_results_report
from quizcode.core.share_code import generate_share_code, normalize_share_code

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _SessionEntry:
    session: ParticipationSession
    last_synced_at: float
    client_token: str | None = None


class QuizManager:
    """Facade over the Catalog Store, the authoring model and participant sessions.

    Participant sessions are advanced lazily: every access converts the whole
    seconds elapsed on `clock` since the last access into timer ticks.
    """

    def __init__(
        self,
        store: CatalogStore,
        *,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        max_share_code_attempts: int = MAX_SHARE_CODE_ATTEMPTS,
    ) -> None:
        self._lock = Lock()
        self._store = store
        self._clock = clock
        self._rng = rng or random.Random()
        self._max_share_code_attempts = max_share_code_attempts
        self._sessions: dict[tuple[str, str], _SessionEntry] = {}

    # --- Authoring ---

    def save_quiz(self, builder: QuizBuilder, owner_id: str, *, publish: bool) -> Quiz:
        """Validate and persist the draft as a draft or a published quiz.

        Validation errors are raised before anything is written.
        """
        status = QuizStatus.PUBLISHED if publish else QuizStatus.DRAFT
        builder.validate()
        with self._lock:
            if builder.quiz_id is not None:
                existing = self._store_call(self._store.fetch_quiz, builder.quiz_id)
                if existing.is_published:
                    raise InvalidTransitionError("Published quizzes can no longer be edited.")
            snapshot, quiz_id = self._write_quiz_row(builder, owner_id, status)
            if builder.quiz_id is not None:
                self._store_call(self._store.delete_questions, quiz_id)
            self._write_questions(snapshot, quiz_id)
            saved = self._store_call(self._store.fetch_quiz, quiz_id)
        builder.mark_saved(saved.id)
        if saved.is_published:
            logger.info("Published quiz %s with share code %s", saved.id, saved.share_code)
        else:
            logger.info("Saved draft quiz %s", saved.id)
        return saved

    def _write_quiz_row(self, builder: QuizBuilder, owner_id: str, status: QuizStatus) -> tuple[Quiz, str]:
        """Create or update the quiz row, retrying share codes the store rejects."""
        attempts = self._max_share_code_attempts if status is QuizStatus.PUBLISHED else 1
        for _ in range(attempts):
            share_code = generate_share_code(self._rng) if status is QuizStatus.PUBLISHED else None
            snapshot = builder.build_snapshot(status, share_code)
            try:
                if builder.quiz_id is None:
                    quiz_id = self._store_call(
                        self._store.create_quiz,
                        snapshot.title, snapshot.description, status, share_code, owner_id,
                    )
                else:
                    quiz_id = builder.quiz_id
                    self._store_call(
                        self._store.update_quiz,
                        quiz_id,
                        title=snapshot.title,
                        description=snapshot.description,
                        status=status,
                        share_code=share_code,
                    )
                return snapshot, quiz_id
            except ShareCodeConflictError:
                logger.info("Share code %s already taken, retrying", share_code)
        raise StoreError("Could not allocate a unique share code. Please try again.")

    def _write_questions(self, snapshot: Quiz, quiz_id: str) -> None:
        # A failure part way through leaves the already inserted rows behind.
        for question in snapshot.questions:
            question_id = self._store_call(
                self._store.create_question,
                quiz_id, question.text, question.time_limit_seconds, question.order,
            )
            for option in question.options:
                self._store_call(
                    self._store.create_option,
                    question_id, option.text, option.is_correct, option.order,
                )

    def list_quizzes(self, owner_id: str | None = None) -> list[Quiz]:
        with self._lock:
            return self._store_call(self._store.list_quizzes, owner_id)

    def get_quiz(self, quiz_id: str) -> Quiz:
        with self._lock:
            return self._store_call(self._store.fetch_quiz, quiz_id)

    def delete_quiz(self, quiz_id: str) -> None:
        with self._lock:
            self._store_call(self._store.delete_quiz, quiz_id)
            self._sessions = {
                key: entry for key, entry in self._sessions.items() if key[0] != quiz_id
            }
        logger.info("Deleted quiz %s", quiz_id)

    # --- Participation ---

    def find_published_quiz(self, share_code: str) -> Quiz:
        code = normalize_share_code(share_code)
        if not code:
            raise QuizNotFoundError("Please enter a quiz code.")
        with self._lock:
            return self._store_call(self._store.fetch_quiz_by_share_code, code, QuizStatus.PUBLISHED)

    def join_quiz(self, share_code: str, identity: IdentityProvider) -> ParticipationSession:
        """Return a waiting session for the identity, creating it if needed.

        Joining again is only allowed while the session is still waiting and
        from the same client. Once started, the participant resumes through
        `get_session` instead.
        """
        display_name = identity.get_current_identity()
        if not display_name:
            raise NotAuthenticatedError("Sign in before joining a quiz.")
        quiz = self.find_published_quiz(share_code)
        with self._lock:
            key = (quiz.id, display_name)
            entry = self._sessions.get(key)
            if entry is None:
                entry = _SessionEntry(
                    session=ParticipationSession(quiz, self._store, identity),
                    last_synced_at=self._clock(),
                    client_token=identity.get_client_token(),
                )
                self._sessions[key] = entry
                logger.info("%s joined quiz %s", display_name, quiz.id)
                return entry.session
            if (
                entry.client_token != identity.get_client_token()
                or entry.session.state.status is not ParticipationStatus.WAITING
            ):
                logger.info("%s tried to join quiz %s twice", display_name, quiz.id)
                raise DuplicateParticipantError(f"{display_name} has already joined this quiz.")
            self._sync(entry)
            return entry.session

    def start_session(self, share_code: str, identity: IdentityProvider) -> ParticipationState:
        quiz = self.find_published_quiz(share_code)
        with self._lock:
            entry = self._synced_entry(quiz, identity)
            state = entry.session.start()
            entry.last_synced_at = self._clock()
            return state

    def get_session(self, share_code: str, identity: IdentityProvider) -> ParticipationSession:
        """Return the existing session, advanced to the current time."""
        quiz = self.find_published_quiz(share_code)
        with self._lock:
            return self._synced_entry(quiz, identity).session

    def submit_answer(
        self, share_code: str, identity: IdentityProvider, option_id: str
    ) -> ParticipantAnswer | None:
        """Record an answer; returns None when the session ignores the selection."""
        quiz = self.find_published_quiz(share_code)
        with self._lock:
            return self._synced_entry(quiz, identity).session.select_option(option_id)

    def _synced_entry(self, quiz: Quiz, identity: IdentityProvider) -> _SessionEntry:
        display_name = identity.get_current_identity()
        if not display_name:
            raise NotAuthenticatedError("Sign in before joining a quiz.")
        entry = self._sessions.get((quiz.id, display_name))
        # A session belongs to the client that joined it, not to the name alone.
        if entry is None or entry.client_token != identity.get_client_token():
            raise InvalidTransitionError("Join the quiz first.")
        self._sync(entry)
        return entry

    def _sync(self, entry: _SessionEntry) -> None:
        elapsed = int(self._clock() - entry.last_synced_at)
        if elapsed > 0:
            entry.session.tick(elapsed)
            entry.last_synced_at += elapsed

    # --- Results ---

    def get_results(self, quiz_id: str) -> ResultsReport:
        with self._lock:
            quiz = self._store_call(self._store.fetch_quiz, quiz_id)
            participants = self._store_call(self._store.fetch_participants_with_answers, quiz_id)
        return build_results_report(quiz, participants)

    def export_results_csv(self, quiz_id: str) -> str:
        with self._lock:
            quiz = self._store_call(self._store.fetch_quiz, quiz_id)
            participants = self._store_call(self._store.fetch_participants_with_answers, quiz_id)
        return serialize_results_csv(quiz, build_results_report(quiz, participants))

    # --- Helpers ---

    @staticmethod
    def _store_call(func, *args, **kwargs):
        """Run a store call, logging failures that are not expected outcomes."""
        try:
            return func(*args, **kwargs)
        except (QuizNotFoundError, ShareCodeConflictError):
            raise
        except QuizError:
            logger.exception("Catalog store call %s failed", getattr(func, "__name__", func))
            raise
