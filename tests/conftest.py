"""Shared fixtures for the quiz core tests."""

from __future__ import annotations

import pytest

from quizcode.core.models import Quiz, QuizOption, QuizQuestion, QuizStatus
from quizcode.core.quiz_manager import QuizManager
from quizcode.core.services.catalog_store import InMemoryCatalogStore
from quizcode.core.services.quiz_builder import QuizBuilder


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_quiz(question_count: int = 2, time_limit_seconds: int = 30) -> Quiz:
    """Quiz whose questions each have options A, B, C with B correct."""
    questions = []
    for number in range(1, question_count + 1):
        questions.append(
            QuizQuestion(
                id=f"q{number}",
                text=f"Question {number}",
                time_limit_seconds=time_limit_seconds,
                options=[
                    QuizOption(id=f"q{number}-{letter}", text=letter, is_correct=letter == "B", order=order)
                    for order, letter in enumerate("ABC")
                ],
                order=number - 1,
            )
        )
    return Quiz(
        id="quiz-1",
        title="Capitals",
        status=QuizStatus.PUBLISHED,
        questions=questions,
        share_code="ABC234",
    )


def make_builder(title: str = "Capitals", question_count: int = 2, time_limit_seconds: int = 30) -> QuizBuilder:
    """Builder holding a valid draft with options A, B, C and B correct."""
    builder = QuizBuilder()
    builder.set_title(title)
    for number in range(1, question_count + 1):
        index = builder.add_question(f"Question {number}", time_limit_seconds)
        builder.set_option_text(index, 0, "A")
        builder.set_option_text(index, 1, "B")
        builder.add_option(index, "C")
        builder.set_option_correct(index, 1)
    return builder


@pytest.fixture
def quiz() -> Quiz:
    return make_quiz()


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(store: InMemoryCatalogStore, clock: FakeClock) -> QuizManager:
    return QuizManager(store, clock=clock)
