"""Utilities for exporting quiz results as CSV."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from quizcode.core.models import Quiz
from quizcode.core.services.scoring import ResultsReport

NO_ANSWER_TEXT = "No answer"


def default_export_filename(quiz: Quiz) -> str:
    safe_title = "".join(char for char in quiz.title if char not in '<>:"/\\|?*').strip()
    return f"{safe_title or 'quiz'}-results.csv"


def serialize_results_csv(quiz: Quiz, report: ResultsReport) -> str:
    """Render one row per participant with the option text chosen for each question."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Participant", "Score", "Total Time", *(q.text for q in quiz.questions)])
    for result in report.participants:
        selected = {answer.question_id: answer.option_id for answer in result.answers}
        row = [result.participant_name, f"{result.score:.1f}", result.total_time]
        for question in quiz.questions:
            option = question.find_option(selected.get(question.id, ""))
            row.append(option.text if option is not None else NO_ANSWER_TEXT)
        writer.writerow(row)
    return buffer.getvalue()


def save_results_to_file(file_path: Path, quiz: Quiz, report: ResultsReport) -> None:
    """Persist the results table to disk."""
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_results_csv(quiz, report), encoding="utf-8")
