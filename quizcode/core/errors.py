"""Exception types shared by the quiz services, the API and the host console."""

from __future__ import annotations

from enum import Enum


class QuizError(Exception):
    """Base class for all quiz application errors."""


class ValidationRule(Enum):
    """Authoring rules, listed in the order they are checked."""

    TITLE_REQUIRED = "Quiz title must not be empty."
    QUESTIONS_REQUIRED = "Quiz must contain at least one question."
    QUESTION_TEXT_REQUIRED = "Question text must not be empty."
    MIN_OPTIONS = "Each question must have at least two options."
    CORRECT_OPTION_REQUIRED = "Each question must have at least one correct option."
    OPTION_TEXT_REQUIRED = "Option text must not be empty."


class QuizValidationError(QuizError, ValueError):
    """Raised when a quiz draft violates an authoring rule."""

    def __init__(
        self,
        rule: ValidationRule,
        question_index: int | None = None,
        option_index: int | None = None,
    ) -> None:
        self.rule = rule
        self.question_index = question_index
        self.option_index = option_index
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.question_index is None:
            return self.rule.value
        location = f"Question {self.question_index + 1}"
        if self.option_index is not None:
            location += f", option {self.option_index + 1}"
        return f"{location}: {self.rule.value}"


class QuizNotFoundError(QuizError):
    """Raised when a quiz id or share code does not resolve."""


class DuplicateParticipantError(QuizError):
    """Raised when an identity has already joined a quiz."""


class DuplicateAnswerError(QuizError):
    """Raised when a participant already answered a question."""


class NotAuthenticatedError(QuizError):
    """Raised when an action needs a signed-in identity and there is none."""


class ShareCodeConflictError(QuizError):
    """Raised by the store when a share code is already taken."""


class StoreError(QuizError):
    """Generic Catalog Store failure (network, constraint or retry exhaustion)."""


class InvalidTransitionError(QuizError):
    """Raised when a participation or lifecycle transition is not allowed."""
