from __future__ import annotations

import pytest

from conftest import make_builder
from quizcode.core.errors import QuizValidationError, ValidationRule
from quizcode.core.models import QuizStatus
from quizcode.core.services.quiz_builder import QuizBuilder


def _rule_of(builder: QuizBuilder) -> QuizValidationError:
    with pytest.raises(QuizValidationError) as excinfo:
        builder.validate()
    return excinfo.value


def test_valid_draft_passes():
    make_builder().validate()


def test_missing_title_reported_before_anything_else():
    builder = QuizBuilder()
    builder.set_title("   ")
    builder.add_question("")
    error = _rule_of(builder)
    assert error.rule is ValidationRule.TITLE_REQUIRED
    assert error.question_index is None


def test_quiz_without_questions():
    builder = QuizBuilder()
    builder.set_title("Empty")
    assert _rule_of(builder).rule is ValidationRule.QUESTIONS_REQUIRED


def test_question_text_checked_before_correct_flag_of_earlier_question():
    builder = make_builder()
    builder.set_option_correct(0, 1, False)
    builder.update_question(1, text="  ")
    error = _rule_of(builder)
    assert error.rule is ValidationRule.QUESTION_TEXT_REQUIRED
    assert error.question_index == 1
    assert str(error) == "Question 2: Question text must not be empty."


def test_missing_correct_option():
    builder = make_builder()
    builder.set_option_correct(1, 1, False)
    error = _rule_of(builder)
    assert error.rule is ValidationRule.CORRECT_OPTION_REQUIRED
    assert error.question_index == 1


def test_correct_flag_checked_before_option_text():
    builder = make_builder()
    builder.set_option_text(0, 2, "")
    builder.set_option_correct(1, 1, False)
    assert _rule_of(builder).rule is ValidationRule.CORRECT_OPTION_REQUIRED


def test_empty_option_text_reports_position():
    builder = make_builder()
    builder.set_option_text(0, 2, " ")
    error = _rule_of(builder)
    assert error.rule is ValidationRule.OPTION_TEXT_REQUIRED
    assert (error.question_index, error.option_index) == (0, 2)
    assert str(error).startswith("Question 1, option 3:")


def test_validation_error_is_a_value_error():
    assert issubclass(QuizValidationError, ValueError)


def test_new_question_starts_with_two_empty_options():
    builder = QuizBuilder()
    index = builder.add_question("What?")
    question = builder.get_question_at_index(index)
    assert len(question.options) == 2
    assert all(option.text == "" and not option.is_correct for option in question.options)
    assert question.time_limit_seconds == 30


def test_cannot_remove_below_two_options():
    builder = QuizBuilder()
    index = builder.add_question("What?")
    with pytest.raises(ValueError):
        builder.remove_option(index, 0)
    builder.add_option(index, "third")
    builder.remove_option(index, 0)
    assert len(builder.get_question_at_index(index).options) == 2


@pytest.mark.parametrize("bad_limit", [0, -5, 2.5, True, "30"])
def test_time_limit_must_be_positive_integer(bad_limit):
    builder = QuizBuilder()
    index = builder.add_question("What?")
    with pytest.raises(ValueError):
        builder.update_question(index, time_limit_seconds=bad_limit)


def test_out_of_range_indices_raise_index_error():
    builder = make_builder()
    with pytest.raises(IndexError):
        builder.get_question_at_index(5)
    with pytest.raises(IndexError):
        builder.set_option_text(0, 9, "x")


def test_toggle_option_correct_returns_new_flag():
    builder = make_builder()
    assert builder.toggle_option_correct(0, 0) is True
    assert builder.toggle_option_correct(0, 0) is False


def test_get_questions_returns_detached_copies():
    builder = make_builder()
    questions = builder.get_questions()
    questions[0].text = "changed"
    assert builder.get_question_at_index(0).text == "Question 1"


def test_snapshot_trims_text_and_assigns_order():
    builder = make_builder(title="  Capitals  ")
    builder.set_option_text(0, 0, "  A  ")
    snapshot = builder.build_snapshot(QuizStatus.PUBLISHED, "ABC234")
    assert snapshot.title == "Capitals"
    assert snapshot.share_code == "ABC234"
    assert [q.order for q in snapshot.questions] == [0, 1]
    assert [o.order for o in snapshot.questions[0].options] == [0, 1, 2]
    assert snapshot.questions[0].options[0].text == "A"


def test_published_snapshot_needs_share_code():
    with pytest.raises(ValueError):
        make_builder().build_snapshot(QuizStatus.PUBLISHED)


def test_draft_snapshot_drops_share_code():
    snapshot = make_builder().build_snapshot(QuizStatus.DRAFT, "ABC234")
    assert snapshot.share_code is None


def test_unsaved_changes_tracking():
    builder = QuizBuilder()
    assert not builder.has_unsaved_changes()
    builder.set_title("Quiz")
    assert builder.has_unsaved_changes()
    builder.mark_saved("quiz-1")
    assert not builder.has_unsaved_changes()
    assert builder.quiz_id == "quiz-1"
