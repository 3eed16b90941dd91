"""Component for creating and editing quizzes."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from quizcode.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_SECONDS,
    MAX_TIME_LIMIT_SECONDS,
    MIN_OPTIONS_PER_QUESTION,
    MIN_TIME_LIMIT_SECONDS,
)
from quizcode.constants.ui_constants import (
    AUTHOR_ADD_OPTION_BUTTON,
    AUTHOR_ADD_QUESTION_BUTTON,
    AUTHOR_NEW_QUIZ_BUTTON,
    AUTHOR_NEXT_BUTTON,
    AUTHOR_PREV_BUTTON,
    AUTHOR_PUBLISH_BUTTON,
    AUTHOR_REMOVE_QUESTION_BUTTON,
    AUTHOR_SAVE_DRAFT_BUTTON,
    PLACEHOLDER_DESCRIPTION,
    PLACEHOLDER_QUESTION,
    PLACEHOLDER_TITLE,
    QUIZ_SAVED_MESSAGE,
)
from quizcode.core.errors import InvalidTransitionError, QuizError, QuizValidationError
from quizcode.core.models import Quiz
from quizcode.core.question_renderer import render_question_preview
from quizcode.core.quiz_manager import QuizManager
from quizcode.core.services.quiz_builder import QuizBuilder
from quizcode.core.share_code import build_share_url
from quizcode.ui.dialog_helpers import (
    confirm_discard_changes,
    confirm_remove_question,
    show_error,
    show_share_link,
    show_warning,
)


class _OptionRow(QWidget):
    """One option: text, correctness checkbox and a remove button."""

    def __init__(self, label: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        self.setLayout(row)
        self.text_input = QLineEdit(self)
        self.text_input.setPlaceholderText(f"Option {label}")
        row.addWidget(self.text_input, stretch=1)
        self.correct_checkbox = QCheckBox("Correct", self)
        row.addWidget(self.correct_checkbox)
        self.remove_button = QPushButton("Remove", self)
        row.addWidget(self.remove_button)


class AuthoringPanel(QWidget):
    """UI component for building a quiz and saving it as a draft or publishing it."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        owner_id: str,
        participant_url: str,
        on_saved: Callable[[Quiz], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.owner_id = owner_id
        self.participant_url = participant_url
        self.on_saved = on_saved
        self.builder = QuizBuilder()
        self._current_question_index: int = -1
        self._populating: bool = False
        self._option_rows: list[_OptionRow] = []

        self._build_ui()
        self._show_question(-1)

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_input = QLineEdit(self)
        self.title_input.setPlaceholderText(PLACEHOLDER_TITLE)
        self.title_input.textChanged.connect(self._handle_title_changed)
        layout.addWidget(self.title_input)

        self.description_input = QPlainTextEdit(self)
        self.description_input.setPlaceholderText(PLACEHOLDER_DESCRIPTION)
        self.description_input.setMaximumHeight(80)
        self.description_input.textChanged.connect(self._handle_description_changed)
        layout.addWidget(self.description_input)

        action_row = QHBoxLayout()
        self.add_question_button = QPushButton(AUTHOR_ADD_QUESTION_BUTTON, self)
        self.add_question_button.clicked.connect(self._handle_add_question)
        action_row.addWidget(self.add_question_button)

        self.remove_question_button = QPushButton(AUTHOR_REMOVE_QUESTION_BUTTON, self)
        self.remove_question_button.clicked.connect(self._handle_remove_question)
        action_row.addWidget(self.remove_question_button)

        self.prev_button = QPushButton(AUTHOR_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._navigate(-1))
        action_row.addWidget(self.prev_button)

        self.next_button = QPushButton(AUTHOR_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._navigate(1))
        action_row.addWidget(self.next_button)
        layout.addLayout(action_row)

        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._handle_question_text_changed)
        layout.addWidget(self.question_input)

        time_limit_row = QHBoxLayout()
        time_limit_row.addWidget(QLabel("Time limit:", self))
        self.time_limit_spinbox = QSpinBox(self)
        self.time_limit_spinbox.setRange(MIN_TIME_LIMIT_SECONDS, MAX_TIME_LIMIT_SECONDS)
        self.time_limit_spinbox.setSingleStep(5)
        self.time_limit_spinbox.setSuffix(" s")
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
        self.time_limit_spinbox.valueChanged.connect(self._handle_time_limit_changed)
        time_limit_row.addWidget(self.time_limit_spinbox)
        time_limit_row.addStretch()
        layout.addLayout(time_limit_row)

        self.options_layout = QVBoxLayout()
        layout.addLayout(self.options_layout)

        self.add_option_button = QPushButton(AUTHOR_ADD_OPTION_BUTTON, self)
        self.add_option_button.clicked.connect(self._handle_add_option)
        layout.addWidget(self.add_option_button)

        self.preview_view = QTextBrowser(self)
        layout.addWidget(self.preview_view)

        save_row = QHBoxLayout()
        self.new_quiz_button = QPushButton(AUTHOR_NEW_QUIZ_BUTTON, self)
        self.new_quiz_button.clicked.connect(self._handle_new_quiz)
        save_row.addWidget(self.new_quiz_button)
        save_row.addStretch()
        self.save_draft_button = QPushButton(AUTHOR_SAVE_DRAFT_BUTTON, self)
        self.save_draft_button.clicked.connect(lambda: self._handle_save(publish=False))
        save_row.addWidget(self.save_draft_button)
        self.publish_button = QPushButton(AUTHOR_PUBLISH_BUTTON, self)
        self.publish_button.clicked.connect(lambda: self._handle_save(publish=True))
        save_row.addWidget(self.publish_button)
        layout.addLayout(save_row)

        self.status_label = QLabel("", self)
        layout.addWidget(self.status_label)

    # --- Quiz level ---

    def load_quiz(self, quiz: Quiz | None) -> None:
        """Start editing a stored draft, or a blank quiz when None."""
        self.builder = QuizBuilder(quiz)
        self._populating = True
        self.title_input.setText(self.builder.title)
        self.description_input.setPlainText(self.builder.description)
        self._populating = False
        self._show_question(0 if self.builder.get_question_count() else -1)

    def check_unsaved_changes(self) -> bool:
        """Return True when it is fine to replace the quiz being edited."""
        if not self.builder.has_unsaved_changes():
            return True
        return confirm_discard_changes(self)

    def _handle_new_quiz(self) -> None:
        if self.check_unsaved_changes():
            self.load_quiz(None)
            self.status_label.setText("Ready to create a new quiz.")

    def _handle_title_changed(self, text: str) -> None:
        if not self._populating:
            self.builder.set_title(text)

    def _handle_description_changed(self) -> None:
        if not self._populating:
            self.builder.set_description(self.description_input.toPlainText())

    def _handle_save(self, publish: bool) -> None:
        try:
            saved = self.quiz_manager.save_quiz(self.builder, self.owner_id, publish=publish)
        except QuizValidationError as exc:
            if exc.question_index is not None:
                self._show_question(exc.question_index)
            show_warning(self, "Quiz not saved", str(exc))
            return
        except InvalidTransitionError as exc:
            show_warning(self, "Quiz not saved", str(exc))
            return
        except QuizError as exc:
            show_error(self, "Save failed", f"Could not save the quiz: {exc}")
            return

        if saved.is_published:
            self.load_quiz(None)
            self.status_label.setText(f"Published '{saved.title}' with code {saved.share_code}.")
            show_share_link(self, saved.share_code, build_share_url(self.participant_url, saved.share_code))
        else:
            self.status_label.setText(QUIZ_SAVED_MESSAGE)
        if self.on_saved is not None:
            self.on_saved(saved)

    # --- Questions ---

    def _handle_add_question(self) -> None:
        index = self.builder.add_question()
        self._show_question(index)

    def _handle_remove_question(self) -> None:
        if self._current_question_index < 0:
            return
        if not confirm_remove_question(self, self._current_question_index + 1):
            return
        self.builder.remove_question(self._current_question_index)
        count = self.builder.get_question_count()
        self._show_question(min(self._current_question_index, count - 1))

    def _navigate(self, step: int) -> None:
        count = self.builder.get_question_count()
        if count == 0:
            return
        target = max(0, min(count - 1, self._current_question_index + step))
        self._show_question(target)

    def _handle_question_text_changed(self) -> None:
        if self._populating or self._current_question_index < 0:
            return
        self.builder.update_question(self._current_question_index, text=self.question_input.toPlainText())
        self._refresh_preview()

    def _handle_time_limit_changed(self, value: int) -> None:
        if self._populating or self._current_question_index < 0:
            return
        self.builder.update_question(self._current_question_index, time_limit_seconds=int(value))

    # --- Options ---

    def _handle_add_option(self) -> None:
        if self._current_question_index < 0:
            return
        self.builder.add_option(self._current_question_index)
        self._show_question(self._current_question_index)

    def _handle_remove_option(self, option_index: int) -> None:
        try:
            self.builder.remove_option(self._current_question_index, option_index)
        except ValueError as exc:
            show_warning(self, "Cannot remove option", str(exc))
            return
        self._show_question(self._current_question_index)

    def _handle_option_text_changed(self, option_index: int, text: str) -> None:
        if self._populating:
            return
        self.builder.set_option_text(self._current_question_index, option_index, text)
        self._refresh_preview()

    def _handle_option_correct_changed(self, option_index: int, checked: bool) -> None:
        if self._populating:
            return
        self.builder.set_option_correct(self._current_question_index, option_index, checked)
        self._refresh_preview()

    # --- Rendering ---

    def _show_question(self, index: int) -> None:
        self._populating = True
        self._current_question_index = index
        self._clear_option_rows()
        has_question = index >= 0
        for widget in (
            self.question_input,
            self.time_limit_spinbox,
            self.add_option_button,
            self.remove_question_button,
            self.prev_button,
            self.next_button,
        ):
            widget.setEnabled(has_question)

        if has_question:
            question = self.builder.get_question_at_index(index)
            self.question_input.setPlainText(question.text)
            self.time_limit_spinbox.setValue(question.time_limit_seconds)
            for option_index, option in enumerate(question.options):
                row = _OptionRow(chr(ord("A") + option_index), self)
                row.text_input.setText(option.text)
                row.correct_checkbox.setChecked(option.is_correct)
                row.remove_button.setEnabled(len(question.options) > MIN_OPTIONS_PER_QUESTION)
                row.text_input.textChanged.connect(
                    lambda text, i=option_index: self._handle_option_text_changed(i, text)
                )
                row.correct_checkbox.toggled.connect(
                    lambda checked, i=option_index: self._handle_option_correct_changed(i, checked)
                )
                row.remove_button.clicked.connect(
                    lambda _=False, i=option_index: self._handle_remove_option(i)
                )
                self.options_layout.addWidget(row)
                self._option_rows.append(row)
            self.status_label.setText(
                f"Editing question {index + 1} of {self.builder.get_question_count()}."
            )
        else:
            self.question_input.clear()
            self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
            self.status_label.setText("Add a question to get started.")
        self._populating = False
        self._refresh_preview()

    def _clear_option_rows(self) -> None:
        for row in self._option_rows:
            self.options_layout.removeWidget(row)
            row.deleteLater()
        self._option_rows = []

    def _refresh_preview(self) -> None:
        if self._current_question_index < 0:
            self.preview_view.setHtml("")
            return
        question = self.builder.get_question_at_index(self._current_question_index)
        self.preview_view.setHtml(render_question_preview(question))
