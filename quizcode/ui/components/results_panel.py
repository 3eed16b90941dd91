"""Component showing aggregate and per-question results for one quiz."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from quizcode.constants.ui_constants import (
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    RESULTS_EMPTY_STATE,
    RESULTS_EXPORT_BUTTON,
)
from quizcode.core.errors import QuizError
from quizcode.core.models import Quiz
from quizcode.core.question_renderer import render_question_summary
from quizcode.core.quiz_manager import QuizManager
from quizcode.core.results_exporter import default_export_filename, save_results_to_file
from quizcode.core.services.scoring import ResultsReport
from quizcode.ui.dialog_helpers import show_error, show_info


class ResultsPanel(QWidget):
    """UI component for reviewing and exporting the results of a quiz."""

    def __init__(self, quiz_manager: QuizManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self._quiz: Quiz | None = None
        self._report: ResultsReport | None = None
        self._last_export_dir: Path = Path.cwd()

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet("font-size: 16pt; font-weight: bold;")
        header_row.addWidget(self.title_label, stretch=1)
        self.export_button = QPushButton(RESULTS_EXPORT_BUTTON, self)
        self.export_button.clicked.connect(self._handle_export)
        header_row.addWidget(self.export_button)
        layout.addLayout(header_row)

        stats_row = QHBoxLayout()
        self.participants_label = QLabel(self)
        self.average_score_label = QLabel(self)
        self.average_time_label = QLabel(self)
        for label in (self.participants_label, self.average_score_label, self.average_time_label):
            stats_row.addWidget(label)
        layout.addLayout(stats_row)

        self.empty_label = QLabel(RESULTS_EMPTY_STATE, self)
        layout.addWidget(self.empty_label)

        self.participant_table = QTableWidget(0, 4, self)
        self.participant_table.setHorizontalHeaderLabels(["Rank", "Participant", "Score", "Total Time"])
        self.participant_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.participant_table.setEditTriggers(QTableWidget.NoEditTriggers)
        layout.addWidget(self.participant_table, stretch=1)

        self.question_selector = QComboBox(self)
        self.question_selector.currentIndexChanged.connect(self._render_question_summary)
        layout.addWidget(self.question_selector)

        self.question_view = QTextBrowser(self)
        layout.addWidget(self.question_view, stretch=1)

    def show_quiz(self, quiz: Quiz) -> None:
        self._quiz = quiz
        self.title_label.setText(quiz.title)
        self.question_selector.blockSignals(True)
        self.question_selector.clear()
        for index, question in enumerate(quiz.questions):
            self.question_selector.addItem(f"Question {index + 1}: {question.text[:60]}")
        self.question_selector.blockSignals(False)
        self.refresh()

    def refresh(self) -> None:
        if self._quiz is None:
            return
        try:
            self._report = self.quiz_manager.get_results(self._quiz.id)
        except QuizError as exc:
            show_error(self, "Failed to load results", str(exc))
            self._quiz = None
            return
        self._render_overview(self._report)
        self._render_question_summary(self.question_selector.currentIndex())

    def _render_overview(self, report: ResultsReport) -> None:
        has_results = report.has_results
        self.empty_label.setVisible(not has_results)
        self.export_button.setEnabled(has_results)
        if report.overall is None:
            self.participants_label.setText("Total Participants: 0")
            self.average_score_label.setText("Average Score: -")
            self.average_time_label.setText("Average Time: -")
        else:
            self.participants_label.setText(f"Total Participants: {report.overall.total_participants}")
            self.average_score_label.setText(f"Average Score: {report.overall.average_score:.1f}%")
            self.average_time_label.setText(f"Average Time: {report.overall.average_time:.1f}s")

        self.participant_table.setRowCount(len(report.participants))
        for row, result in enumerate(report.participants):
            values = [str(row + 1), result.participant_name, f"{result.score:.1f}%", f"{result.total_time}s"]
            for column, value in enumerate(values):
                self.participant_table.setItem(row, column, QTableWidgetItem(value))

    def _render_question_summary(self, index: int) -> None:
        if self._report is None or not 0 <= index < len(self._report.questions):
            self.question_view.setHtml("")
            return
        self.question_view.setHtml(render_question_summary(self._report.questions[index]))

    def _handle_export(self) -> None:
        if self._quiz is None or self._report is None:
            return
        default_path = self._last_export_dir / default_export_filename(self._quiz)
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(default_path),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return
        try:
            save_results_to_file(Path(file_path), self._quiz, self._report)
        except OSError as exc:
            show_error(self, "Export failed", str(exc))
            return
        self._last_export_dir = Path(file_path).parent
        show_info(self, "Results exported", f"Results exported to {file_path}.")
