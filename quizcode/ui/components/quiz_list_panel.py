"""Component listing the host's quizzes."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizcode.constants.ui_constants import (
    LIST_COPY_LINK_BUTTON,
    LIST_DELETE_BUTTON,
    LIST_EDIT_BUTTON,
    LIST_EMPTY_STATE,
    LIST_REFRESH_BUTTON,
    LIST_RESULTS_BUTTON,
    NO_QUIZ_SELECTED_MESSAGE,
)
from quizcode.core.errors import QuizError
from quizcode.core.models import Quiz
from quizcode.core.quiz_manager import QuizManager
from quizcode.core.share_code import build_share_url
from quizcode.ui.dialog_helpers import confirm_delete_quiz, show_error, show_info, show_warning


class QuizListPanel(QWidget):
    """UI component for browsing, sharing and deleting quizzes."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        owner_id: str,
        participant_url: str,
        on_edit_quiz: Callable[[Quiz], None],
        on_show_results: Callable[[Quiz], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.owner_id = owner_id
        self.participant_url = participant_url
        self.on_edit_quiz = on_edit_quiz
        self.on_show_results = on_show_results
        self._quizzes: list[Quiz] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.quiz_list = QListWidget(self)
        self.quiz_list.setAlternatingRowColors(True)
        self.quiz_list.itemDoubleClicked.connect(lambda _: self._handle_results())
        layout.addWidget(self.quiz_list, stretch=1)

        self.empty_label = QLabel(LIST_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        button_row = QHBoxLayout()
        for caption, handler in (
            (LIST_REFRESH_BUTTON, self.refresh),
            (LIST_EDIT_BUTTON, self._handle_edit),
            (LIST_COPY_LINK_BUTTON, self._handle_copy_link),
            (LIST_RESULTS_BUTTON, self._handle_results),
            (LIST_DELETE_BUTTON, self._handle_delete),
        ):
            button = QPushButton(caption, self)
            button.clicked.connect(handler)
            button_row.addWidget(button)
        layout.addLayout(button_row)

    def refresh(self) -> None:
        try:
            self._quizzes = self.quiz_manager.list_quizzes(self.owner_id)
        except QuizError as exc:
            show_error(self, "Failed to load quizzes", str(exc))
            return
        self.quiz_list.clear()
        for quiz in self._quizzes:
            code = f" - code {quiz.share_code}" if quiz.share_code else ""
            created = quiz.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
            QListWidgetItem(
                f"{quiz.title} [{quiz.status.value}]{code} - {len(quiz.questions)} question(s), {created}",
                self.quiz_list,
            )
        self.empty_label.setVisible(not self._quizzes)

    def _selected_quiz(self) -> Quiz | None:
        row = self.quiz_list.currentRow()
        if not 0 <= row < len(self._quizzes):
            show_info(self, "No selection", NO_QUIZ_SELECTED_MESSAGE)
            return None
        return self._quizzes[row]

    def _handle_edit(self) -> None:
        quiz = self._selected_quiz()
        if quiz is None:
            return
        if quiz.is_published:
            show_warning(self, "Quiz published", "Published quizzes can no longer be edited.")
            return
        self.on_edit_quiz(quiz)

    def _handle_copy_link(self) -> None:
        quiz = self._selected_quiz()
        if quiz is None:
            return
        if not quiz.is_published or not quiz.share_code:
            show_warning(self, "Not published", "Quiz must be published before sharing.")
            return
        QApplication.clipboard().setText(build_share_url(self.participant_url, quiz.share_code))
        show_info(self, "Link copied", "Share link copied to clipboard.")

    def _handle_results(self) -> None:
        quiz = self._selected_quiz()
        if quiz is not None:
            self.on_show_results(quiz)

    def _handle_delete(self) -> None:
        quiz = self._selected_quiz()
        if quiz is None or not confirm_delete_quiz(self, quiz.title):
            return
        try:
            self.quiz_manager.delete_quiz(quiz.id)
        except QuizError as exc:
            show_error(self, "Delete failed", f"Failed to delete quiz: {exc}")
            return
        self.refresh()
