"""Scores and aggregate statistics derived from recorded answers.

Everything here is a pure function of (quiz, participants): inputs are never
mutated and nothing is persisted. Unanswered questions count as incorrect
and add no time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from quizcode.core.models import Participant, ParticipantAnswer, Quiz, QuizQuestion


@dataclass(frozen=True, slots=True)
class ParticipantResult:
    participant_id: str
    participant_name: str
    answers: tuple[ParticipantAnswer, ...]
    correct_answers: int
    score: float
    total_time: int


@dataclass(frozen=True, slots=True)
class OptionBreakdown:
    option_id: str
    option_text: str
    is_correct: bool
    count: int
    percentage: float


@dataclass(frozen=True, slots=True)
class QuestionSummary:
    question_id: str
    question_text: str
    total_responses: int
    correct_responses: int
    average_time: float
    option_breakdown: tuple[OptionBreakdown, ...] = ()


@dataclass(frozen=True, slots=True)
class OverallStats:
    total_participants: int
    average_score: float
    average_time: float


@dataclass(frozen=True, slots=True)
class ResultsReport:
    """Everything the results view shows for one quiz."""

    quiz_id: str
    participants: tuple[ParticipantResult, ...] = ()
    overall: OverallStats | None = None  # None means "no results yet"
    questions: tuple[QuestionSummary, ...] = field(default_factory=tuple)

    @property
    def has_results(self) -> bool:
        return self.overall is not None


def _answers_by_question(quiz: Quiz, participant: Participant) -> dict[str, ParticipantAnswer]:
    """Keep the first answer per question, ignoring questions outside the quiz."""
    question_ids = {question.id for question in quiz.questions}
    answers: dict[str, ParticipantAnswer] = {}
    for answer in participant.answers:
        if answer.question_id in question_ids and answer.question_id not in answers:
            answers[answer.question_id] = answer
    return answers


def _first_answer(participant: Participant, question_id: str) -> ParticipantAnswer | None:
    return next((answer for answer in participant.answers if answer.question_id == question_id), None)


def _is_correct(question: QuizQuestion, option_id: str) -> bool:
    option = question.find_option(option_id)
    return option is not None and option.is_correct


def score_participant(quiz: Quiz, participant: Participant) -> ParticipantResult:
    """Score = 100 * correct answers / questions in the quiz."""
    answers = _answers_by_question(quiz, participant)
    correct = sum(
        1
        for question in quiz.questions
        if question.id in answers and _is_correct(question, answers[question.id].option_id)
    )
    question_count = len(quiz.questions)
    score = 100.0 * correct / question_count if question_count else 0.0
    return ParticipantResult(
        participant_id=participant.id,
        participant_name=participant.display_name,
        answers=tuple(answers.values()),
        correct_answers=correct,
        score=score,
        total_time=sum(answer.time_to_answer for answer in answers.values()),
    )


def summarize_overall(results: list[ParticipantResult] | tuple[ParticipantResult, ...]) -> OverallStats | None:
    """Return mean score and time, or None when nobody has taken part."""
    if not results:
        return None
    count = len(results)
    return OverallStats(
        total_participants=count,
        average_score=sum(r.score for r in results) / count,
        average_time=sum(r.total_time for r in results) / count,
    )


def summarize_question(question: QuizQuestion, participants: list[Participant]) -> QuestionSummary:
    """Summarize the first answer of each participant, the same answers scoring counts."""
    responses = [
        answer
        for answer in (_first_answer(participant, question.id) for participant in participants)
        if answer is not None
    ]
    total = len(responses)
    correct = sum(1 for answer in responses if _is_correct(question, answer.option_id))
    average_time = sum(answer.time_to_answer for answer in responses) / total if total else 0.0

    breakdown = []
    for option in question.options:
        count = sum(1 for answer in responses if answer.option_id == option.id)
        breakdown.append(
            OptionBreakdown(
                option_id=option.id,
                option_text=option.text,
                is_correct=option.is_correct,
                count=count,
                percentage=100.0 * count / total if total else 0.0,
            )
        )
    return QuestionSummary(
        question_id=question.id,
        question_text=question.text,
        total_responses=total,
        correct_responses=correct,
        average_time=average_time,
        option_breakdown=tuple(breakdown),
    )


def build_results_report(quiz: Quiz, participants: list[Participant]) -> ResultsReport:
    """Score every participant and summarize every question in one pass."""
    results = sorted(
        (score_participant(quiz, participant) for participant in participants),
        key=lambda r: (-r.score, r.total_time, r.participant_name),
    )
    return ResultsReport(
        quiz_id=quiz.id,
        participants=tuple(results),
        overall=summarize_overall(results),
        questions=tuple(summarize_question(question, participants) for question in quiz.questions),
    )


def top_scorers(report: ResultsReport, limit: int = 3) -> list[ParticipantResult]:
    return list(report.participants[:limit])
