"""Catalog Store: persistence for quizzes, questions, options, participants and answers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Protocol
from uuid import uuid4

from quizcode.core.errors import (
    DuplicateAnswerError,
    DuplicateParticipantError,
    QuizNotFoundError,
    ShareCodeConflictError,
    StoreError,
)
from quizcode.core.models import (
    Participant,
    ParticipantAnswer,
    Quiz,
    QuizOption,
    QuizQuestion,
    QuizStatus,
    utc_now,
)


class CatalogStore(Protocol):
    """Operations the quiz core needs from the backing store."""

    def create_quiz(
        self,
        title: str,
        description: str,
        status: QuizStatus,
        share_code: str | None,
        owner_id: str,
    ) -> str: ...

    def update_quiz(
        self,
        quiz_id: str,
        *,
        title: str,
        description: str,
        status: QuizStatus,
        share_code: str | None,
    ) -> None: ...

    def delete_questions(self, quiz_id: str) -> None: ...

    def create_question(self, quiz_id: str, text: str, time_limit_seconds: int, order: int) -> str: ...

    def create_option(self, question_id: str, text: str, is_correct: bool, order: int) -> str: ...

    def fetch_quiz(self, quiz_id: str) -> Quiz: ...

    def fetch_quiz_by_share_code(
        self, share_code: str, status: QuizStatus | None = QuizStatus.PUBLISHED
    ) -> Quiz: ...

    def list_quizzes(self, owner_id: str | None = None) -> list[Quiz]: ...

    def create_participant(self, quiz_id: str, display_name: str) -> str: ...

    def create_answer(
        self, participant_id: str, question_id: str, option_id: str, time_to_answer: int
    ) -> None: ...

    def fetch_participants_with_answers(self, quiz_id: str) -> list[Participant]: ...

    def delete_quiz(self, quiz_id: str) -> None: ...


@dataclass(slots=True)
class _QuizRow:
    id: str
    title: str
    description: str
    status: QuizStatus
    share_code: str | None
    owner_id: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class _QuestionRow:
    id: str
    quiz_id: str
    text: str
    time_limit_seconds: int
    order: int


@dataclass(slots=True)
class _OptionRow:
    id: str
    question_id: str
    text: str
    is_correct: bool
    order: int


@dataclass(slots=True)
class _ParticipantRow:
    id: str
    quiz_id: str
    display_name: str
    joined_at: datetime = field(default_factory=utc_now)


class InMemoryCatalogStore:
    """Thread-safe in-process store enforcing the relational constraints.

    Unique constraints: share code per quiz, participant per (quiz, name),
    answer per (participant, question). Deleting a quiz cascades to its
    questions, options, participants and answers.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, _QuizRow] = {}
        self._questions: dict[str, _QuestionRow] = {}
        self._options: dict[str, _OptionRow] = {}
        self._participants: dict[str, _ParticipantRow] = {}
        self._answers: dict[tuple[str, str], ParticipantAnswer] = {}

    # --- Quizzes ---

    def create_quiz(
        self,
        title: str,
        description: str,
        status: QuizStatus,
        share_code: str | None,
        owner_id: str,
    ) -> str:
        with self._lock:
            self._check_share_code(share_code, exclude_quiz_id=None)
            row = _QuizRow(
                id=uuid4().hex,
                title=title,
                description=description,
                status=status,
                share_code=share_code,
                owner_id=owner_id,
            )
            self._quizzes[row.id] = row
            return row.id

    def update_quiz(
        self,
        quiz_id: str,
        *,
        title: str,
        description: str,
        status: QuizStatus,
        share_code: str | None,
    ) -> None:
        with self._lock:
            row = self._quiz_row(quiz_id)
            if row.share_code is not None and share_code != row.share_code:
                raise StoreError("Share code cannot change once assigned.")
            self._check_share_code(share_code, exclude_quiz_id=quiz_id)
            row.title = title
            row.description = description
            row.status = status
            row.share_code = share_code
            row.updated_at = utc_now()

    def fetch_quiz(self, quiz_id: str) -> Quiz:
        with self._lock:
            return self._assemble_quiz(self._quiz_row(quiz_id))

    def fetch_quiz_by_share_code(
        self, share_code: str, status: QuizStatus | None = QuizStatus.PUBLISHED
    ) -> Quiz:
        with self._lock:
            for row in self._quizzes.values():
                if row.share_code == share_code and (status is None or row.status is status):
                    return self._assemble_quiz(row)
        raise QuizNotFoundError(f"No quiz found for code {share_code!r}.")

    def list_quizzes(self, owner_id: str | None = None) -> list[Quiz]:
        with self._lock:
            rows = [
                row for row in self._quizzes.values()
                if owner_id is None or row.owner_id == owner_id
            ]
            rows.sort(key=lambda r: r.created_at, reverse=True)
            return [self._assemble_quiz(row) for row in rows]

    def delete_quiz(self, quiz_id: str) -> None:
        with self._lock:
            self._quiz_row(quiz_id)
            self._delete_question_rows(quiz_id)
            participant_ids = {
                p.id for p in self._participants.values() if p.quiz_id == quiz_id
            }
            for participant_id in participant_ids:
                del self._participants[participant_id]
            for key in [k for k in self._answers if k[0] in participant_ids]:
                del self._answers[key]
            del self._quizzes[quiz_id]

    # --- Questions and options ---

    def delete_questions(self, quiz_id: str) -> None:
        with self._lock:
            self._quiz_row(quiz_id)
            self._delete_question_rows(quiz_id)

    def create_question(self, quiz_id: str, text: str, time_limit_seconds: int, order: int) -> str:
        with self._lock:
            self._quiz_row(quiz_id)
            row = _QuestionRow(
                id=uuid4().hex,
                quiz_id=quiz_id,
                text=text,
                time_limit_seconds=time_limit_seconds,
                order=order,
            )
            self._questions[row.id] = row
            return row.id

    def create_option(self, question_id: str, text: str, is_correct: bool, order: int) -> str:
        with self._lock:
            if question_id not in self._questions:
                raise StoreError(f"Question {question_id} does not exist.")
            row = _OptionRow(
                id=uuid4().hex,
                question_id=question_id,
                text=text,
                is_correct=is_correct,
                order=order,
            )
            self._options[row.id] = row
            return row.id

    # --- Participants and answers ---

    def create_participant(self, quiz_id: str, display_name: str) -> str:
        with self._lock:
            self._quiz_row(quiz_id)
            if any(
                p.quiz_id == quiz_id and p.display_name == display_name
                for p in self._participants.values()
            ):
                raise DuplicateParticipantError(
                    f"{display_name} has already joined this quiz."
                )
            row = _ParticipantRow(id=uuid4().hex, quiz_id=quiz_id, display_name=display_name)
            self._participants[row.id] = row
            return row.id

    def create_answer(
        self, participant_id: str, question_id: str, option_id: str, time_to_answer: int
    ) -> None:
        with self._lock:
            if participant_id not in self._participants:
                raise StoreError(f"Participant {participant_id} does not exist.")
            if question_id not in self._questions:
                raise StoreError(f"Question {question_id} does not exist.")
            option = self._options.get(option_id)
            if option is None or option.question_id != question_id:
                raise StoreError(f"Option {option_id} does not belong to question {question_id}.")
            key = (participant_id, question_id)
            if key in self._answers:
                raise DuplicateAnswerError("This question has already been answered.")
            self._answers[key] = ParticipantAnswer(
                participant_id=participant_id,
                question_id=question_id,
                option_id=option_id,
                time_to_answer=time_to_answer,
            )

    def fetch_participants_with_answers(self, quiz_id: str) -> list[Participant]:
        with self._lock:
            self._quiz_row(quiz_id)
            rows = sorted(
                (p for p in self._participants.values() if p.quiz_id == quiz_id),
                key=lambda p: p.joined_at,
            )
            return [
                Participant(
                    id=row.id,
                    quiz_id=row.quiz_id,
                    display_name=row.display_name,
                    joined_at=row.joined_at,
                    answers=[a for (pid, _), a in self._answers.items() if pid == row.id],
                )
                for row in rows
            ]

    # --- Internal helpers (call with the lock held) ---

    def _quiz_row(self, quiz_id: str) -> _QuizRow:
        row = self._quizzes.get(quiz_id)
        if row is None:
            raise QuizNotFoundError(f"Quiz {quiz_id} does not exist.")
        return row

    def _check_share_code(self, share_code: str | None, exclude_quiz_id: str | None) -> None:
        if share_code is None:
            return
        for row in self._quizzes.values():
            if row.share_code == share_code and row.id != exclude_quiz_id:
                raise ShareCodeConflictError(f"Share code {share_code} is already in use.")

    def _delete_question_rows(self, quiz_id: str) -> None:
        question_ids = {q.id for q in self._questions.values() if q.quiz_id == quiz_id}
        for option_id in [o.id for o in self._options.values() if o.question_id in question_ids]:
            del self._options[option_id]
        for question_id in question_ids:
            del self._questions[question_id]

    def _assemble_quiz(self, row: _QuizRow) -> Quiz:
        question_rows = sorted(
            (q for q in self._questions.values() if q.quiz_id == row.id),
            key=lambda q: q.order,
        )
        questions = []
        for question_row in question_rows:
            option_rows = sorted(
                (o for o in self._options.values() if o.question_id == question_row.id),
                key=lambda o: o.order,
            )
            questions.append(
                QuizQuestion(
                    id=question_row.id,
                    text=question_row.text,
                    time_limit_seconds=question_row.time_limit_seconds,
                    options=[
                        QuizOption(id=o.id, text=o.text, is_correct=o.is_correct, order=o.order)
                        for o in option_rows
                    ],
                    order=question_row.order,
                )
            )
        return Quiz(
            id=row.id,
            title=row.title,
            description=row.description,
            owner_id=row.owner_id,
            status=row.status,
            questions=questions,
            share_code=row.share_code,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
