"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from quizcode.constants.quiz_constants import DEFAULT_TIME_LIMIT_SECONDS


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuizStatus(str, Enum):
    """Lifecycle status of a quiz."""

    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(slots=True)
class QuizOption:
    """Selectable answer belonging to exactly one question."""

    id: str
    text: str
    is_correct: bool = False
    order: int = 0


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question with two or more options."""

    id: str
    text: str
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    options: list[QuizOption] = field(default_factory=list)
    order: int = 0

    def find_option(self, option_id: str) -> QuizOption | None:
        return next((option for option in self.options if option.id == option_id), None)

    def correct_option_ids(self) -> list[str]:
        return [option.id for option in self.options if option.is_correct]


@dataclass(slots=True)
class Quiz:
    """A quiz owning its ordered questions and their options."""

    id: str
    title: str
    description: str = ""
    owner_id: str = ""
    status: QuizStatus = QuizStatus.DRAFT
    questions: list[QuizQuestion] = field(default_factory=list)
    share_code: str | None = None  # present iff published
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def is_published(self) -> bool:
        return self.status is QuizStatus.PUBLISHED

    def find_question(self, question_id: str) -> QuizQuestion | None:
        return next((question for question in self.questions if question.id == question_id), None)


@dataclass(frozen=True, slots=True)
class ParticipantAnswer:
    """The option a participant selected for one question."""

    participant_id: str
    question_id: str
    option_id: str
    time_to_answer: int


@dataclass(slots=True)
class Participant:
    """Someone who joined a quiz, with the answers recorded so far."""

    id: str
    quiz_id: str
    display_name: str
    joined_at: datetime = field(default_factory=utc_now)
    answers: list[ParticipantAnswer] = field(default_factory=list)
