"""Mutable authoring model for a quiz draft."""

from __future__ import annotations

import copy
from uuid import uuid4

from quizcode.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_SECONDS,
    MIN_OPTIONS_PER_QUESTION,
)
from quizcode.core.errors import QuizValidationError, ValidationRule
from quizcode.core.models import Quiz, QuizOption, QuizQuestion, QuizStatus, utc_now


class QuizBuilder:
    """Edits the question/option tree of a quiz and produces validated snapshots."""

    def __init__(self, quiz: Quiz | None = None) -> None:
        self._quiz_id: str | None = None
        self._title: str = ""
        self._description: str = ""
        self._questions: list[QuizQuestion] = []
        self._created_at = utc_now()
        self._has_unsaved_changes: bool = False
        if quiz is not None:
            self._load(quiz)

    def _load(self, quiz: Quiz) -> None:
        self._quiz_id = quiz.id
        self._title = quiz.title
        self._description = quiz.description
        self._questions = copy.deepcopy(quiz.questions)
        self._created_at = quiz.created_at

    # --- Quiz fields ---

    @property
    def quiz_id(self) -> str | None:
        """Id of the stored quiz being edited, or None for a new quiz."""
        return self._quiz_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def description(self) -> str:
        return self._description

    def set_title(self, title: str) -> None:
        self._title = title
        self._has_unsaved_changes = True

    def set_description(self, description: str) -> None:
        self._description = description
        self._has_unsaved_changes = True

    # --- Questions ---

    def get_questions(self) -> list[QuizQuestion]:
        """Return a copy of the questions being edited."""
        return copy.deepcopy(self._questions)

    def get_question_count(self) -> int:
        return len(self._questions)

    def get_question_at_index(self, index: int) -> QuizQuestion:
        return copy.deepcopy(self._question(index))

    def add_question(
        self,
        text: str = "",
        time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS,
    ) -> int:
        """Append a question with two empty options and return its index."""
        question = QuizQuestion(
            id=uuid4().hex,
            text=text,
            time_limit_seconds=self._normalize_time_limit(time_limit_seconds),
            options=[self._new_option() for _ in range(MIN_OPTIONS_PER_QUESTION)],
        )
        self._questions.append(question)
        self._has_unsaved_changes = True
        return len(self._questions) - 1

    def remove_question(self, index: int) -> None:
        self._question(index)
        self._questions.pop(index)
        self._has_unsaved_changes = True

    def update_question(
        self,
        index: int,
        *,
        text: str | None = None,
        time_limit_seconds: int | None = None,
    ) -> None:
        question = self._question(index)
        if text is not None:
            question.text = text
        if time_limit_seconds is not None:
            question.time_limit_seconds = self._normalize_time_limit(time_limit_seconds)
        self._has_unsaved_changes = True

    # --- Options ---

    def add_option(self, question_index: int, text: str = "", is_correct: bool = False) -> int:
        question = self._question(question_index)
        question.options.append(self._new_option(text, is_correct))
        self._has_unsaved_changes = True
        return len(question.options) - 1

    def remove_option(self, question_index: int, option_index: int) -> None:
        question = self._question(question_index)
        self._option(question, option_index)
        if len(question.options) <= MIN_OPTIONS_PER_QUESTION:
            raise ValueError(
                f"A question needs at least {MIN_OPTIONS_PER_QUESTION} options."
            )
        question.options.pop(option_index)
        self._has_unsaved_changes = True

    def set_option_text(self, question_index: int, option_index: int, text: str) -> None:
        option = self._option(self._question(question_index), option_index)
        option.text = text
        self._has_unsaved_changes = True

    def set_option_correct(self, question_index: int, option_index: int, is_correct: bool = True) -> None:
        option = self._option(self._question(question_index), option_index)
        option.is_correct = is_correct
        self._has_unsaved_changes = True

    def toggle_option_correct(self, question_index: int, option_index: int) -> bool:
        option = self._option(self._question(question_index), option_index)
        option.is_correct = not option.is_correct
        self._has_unsaved_changes = True
        return option.is_correct

    # --- Validation and snapshots ---

    def validate(self) -> None:
        """Raise QuizValidationError for the first violated rule, in priority order."""
        if not self._title.strip():
            raise QuizValidationError(ValidationRule.TITLE_REQUIRED)
        if not self._questions:
            raise QuizValidationError(ValidationRule.QUESTIONS_REQUIRED)
        for index, question in enumerate(self._questions):
            if not question.text.strip():
                raise QuizValidationError(ValidationRule.QUESTION_TEXT_REQUIRED, index)
        for index, question in enumerate(self._questions):
            if len(question.options) < MIN_OPTIONS_PER_QUESTION:
                raise QuizValidationError(ValidationRule.MIN_OPTIONS, index)
        for index, question in enumerate(self._questions):
            if not any(option.is_correct for option in question.options):
                raise QuizValidationError(ValidationRule.CORRECT_OPTION_REQUIRED, index)
        for index, question in enumerate(self._questions):
            for option_index, option in enumerate(question.options):
                if not option.text.strip():
                    raise QuizValidationError(ValidationRule.OPTION_TEXT_REQUIRED, index, option_index)

    def build_snapshot(self, status: QuizStatus, share_code: str | None = None) -> Quiz:
        """Validate and return a detached, normalized copy of the draft."""
        self.validate()
        if status is QuizStatus.PUBLISHED and not share_code:
            raise ValueError("A published quiz needs a share code.")
        questions = [
            QuizQuestion(
                id=question.id,
                text=question.text.strip(),
                time_limit_seconds=question.time_limit_seconds,
                options=[
                    QuizOption(
                        id=option.id,
                        text=option.text.strip(),
                        is_correct=option.is_correct,
                        order=option_order,
                    )
                    for option_order, option in enumerate(question.options)
                ],
                order=order,
            )
            for order, question in enumerate(self._questions)
        ]
        return Quiz(
            id=self._quiz_id or uuid4().hex,
            title=self._title.strip(),
            description=self._description.strip(),
            status=status,
            questions=questions,
            share_code=share_code if status is QuizStatus.PUBLISHED else None,
            created_at=self._created_at,
            updated_at=utc_now(),
        )

    def has_unsaved_changes(self) -> bool:
        return self._has_unsaved_changes

    def mark_saved(self, quiz_id: str) -> None:
        self._quiz_id = quiz_id
        self._has_unsaved_changes = False

    # --- Helpers ---

    def _question(self, index: int) -> QuizQuestion:
        if not 0 <= index < len(self._questions):
            raise IndexError(f"Question index {index} out of range")
        return self._questions[index]

    @staticmethod
    def _option(question: QuizQuestion, index: int) -> QuizOption:
        if not 0 <= index < len(question.options):
            raise IndexError(f"Option index {index} out of range")
        return question.options[index]

    @staticmethod
    def _new_option(text: str = "", is_correct: bool = False) -> QuizOption:
        return QuizOption(id=uuid4().hex, text=text, is_correct=is_correct)

    @staticmethod
    def _normalize_time_limit(time_limit_seconds: int) -> int:
        if isinstance(time_limit_seconds, bool) or not isinstance(time_limit_seconds, int):
            raise ValueError("Time limit must be provided as an integer number of seconds.")
        if time_limit_seconds <= 0:
            raise ValueError("Time limit must be a positive integer.")
        return time_limit_seconds
