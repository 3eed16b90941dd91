from __future__ import annotations

import copy
import math

from conftest import make_quiz
from quizcode.core.models import Participant, ParticipantAnswer
from quizcode.core.services.scoring import (
    build_results_report,
    score_participant,
    summarize_overall,
    summarize_question,
    top_scorers,
)


def _participant(participant_id: str, name: str, *answers: tuple[str, str, int]) -> Participant:
    return Participant(
        id=participant_id,
        quiz_id="quiz-1",
        display_name=name,
        answers=[
            ParticipantAnswer(participant_id, question_id, option_id, seconds)
            for question_id, option_id, seconds in answers
        ],
    )


def test_score_counts_unanswered_questions_as_incorrect():
    quiz = make_quiz(question_count=4)
    result = score_participant(quiz, _participant("p1", "Ann", ("q1", "q1-B", 3)))
    assert result.correct_answers == 1
    assert result.score == 25.0
    assert result.total_time == 3


def test_score_stays_within_bounds():
    quiz = make_quiz(question_count=3)
    everything_right = _participant(
        "p1", "Ann", ("q1", "q1-B", 1), ("q2", "q2-B", 1), ("q3", "q3-B", 1)
    )
    assert score_participant(quiz, everything_right).score == 100.0
    assert score_participant(quiz, _participant("p2", "Bob")).score == 0.0


def test_only_first_answer_per_question_and_quiz_questions_count():
    quiz = make_quiz()
    participant = _participant(
        "p1", "Ann", ("q1", "q1-B", 2), ("q1", "q1-A", 9), ("elsewhere", "x", 40)
    )
    result = score_participant(quiz, participant)
    assert result.correct_answers == 1
    assert result.total_time == 2


def test_quiz_without_questions_scores_zero():
    quiz = make_quiz(question_count=0)
    assert score_participant(quiz, _participant("p1", "Ann")).score == 0.0


def test_empty_participant_set_has_no_results():
    assert summarize_overall([]) is None
    report = build_results_report(make_quiz(), [])
    assert not report.has_results
    assert report.overall is None
    assert report.participants == ()


def test_zero_response_question_reports_zero_percentages():
    quiz = make_quiz()
    summary = summarize_question(quiz.questions[0], [])
    assert summary.total_responses == 0
    assert summary.average_time == 0.0
    assert [option.percentage for option in summary.option_breakdown] == [0.0, 0.0, 0.0]
    assert not any(math.isnan(option.percentage) for option in summary.option_breakdown)


def test_question_summary_breakdown():
    quiz = make_quiz()
    participants = [
        _participant("p1", "Ann", ("q1", "q1-B", 4)),
        _participant("p2", "Bob", ("q1", "q1-A", 6)),
        _participant("p3", "Cy", ("q1", "q1-B", 2)),
        _participant("p4", "Di", ("q1", "q1-B", 8)),
    ]
    summary = summarize_question(quiz.questions[0], participants)
    assert summary.total_responses == 4
    assert summary.correct_responses == 3
    assert summary.average_time == 5.0
    assert [option.count for option in summary.option_breakdown] == [1, 3, 0]
    assert [option.percentage for option in summary.option_breakdown] == [25.0, 75.0, 0.0]


def test_report_ranks_by_score_then_time_then_name():
    quiz = make_quiz()
    participants = [
        _participant("p1", "Zed", ("q1", "q1-B", 9)),
        _participant("p2", "Bob", ("q1", "q1-B", 4)),
        _participant("p3", "Amy", ("q1", "q1-B", 4)),
        _participant("p4", "Max", ("q1", "q1-B", 1), ("q2", "q2-B", 1)),
    ]
    report = build_results_report(quiz, participants)
    assert [result.participant_name for result in report.participants] == ["Max", "Amy", "Bob", "Zed"]
    assert report.overall.total_participants == 4
    assert report.overall.average_score == 62.5
    assert [result.participant_name for result in top_scorers(report, 2)] == ["Max", "Amy"]


def test_report_is_idempotent_and_leaves_inputs_untouched():
    quiz = make_quiz()
    participants = [_participant("p1", "Ann", ("q1", "q1-B", 3), ("q2", "q2-C", 5))]
    quiz_before = copy.deepcopy(quiz)
    participants_before = copy.deepcopy(participants)

    first = build_results_report(quiz, participants)
    second = build_results_report(quiz, participants)

    assert first == second
    assert quiz == quiz_before
    assert participants == participants_before


def test_question_summary_counts_the_same_answers_as_the_score():
    quiz = make_quiz()
    participant = _participant("p1", "Ann", ("q1", "q1-B", 2), ("q1", "q1-A", 9))

    summary = summarize_question(quiz.questions[0], [participant])
    result = score_participant(quiz, participant)

    assert summary.total_responses == 1
    assert summary.correct_responses == result.correct_answers == 1
    assert summary.average_time == result.total_time == 2
    assert [option.count for option in summary.option_breakdown] == [0, 1, 0]
