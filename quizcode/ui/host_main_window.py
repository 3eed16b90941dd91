"""Qt main window switching between authoring, quiz list and results views."""

from __future__ import annotations

from enum import Enum, auto

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quizcode.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from quizcode.constants.ui_constants import (
    MODE_BUTTON_CREATE,
    MODE_BUTTON_LIST,
    PARTICIPANT_URL_PLACEHOLDER,
    RESULTS_REFRESH_INTERVAL_MS,
    WINDOW_TITLE,
)
from quizcode.core.models import Quiz
from quizcode.core.quiz_manager import QuizManager
from quizcode.ui.components.authoring_panel import AuthoringPanel
from quizcode.ui.components.quiz_list_panel import QuizListPanel
from quizcode.ui.components.results_panel import ResultsPanel
from quizcode.ui.dialog_helpers import show_info


class HostMode(Enum):
    """High-level UI mode for the host console."""

    AUTHORING = auto()
    QUIZ_LIST = auto()
    RESULTS = auto()


class HostMainWindow(QMainWindow):
    """Main Qt window orchestrating the host's views."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        owner_id: str,
        participant_url: str | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(f"{WINDOW_TITLE} - {owner_id}")

        self.quiz_manager = quiz_manager
        self.owner_id = owner_id
        self.participant_url = participant_url or PARTICIPANT_URL_PLACEHOLDER
        self._mode = HostMode.AUTHORING

        self._build_ui()
        self._configure_refresh_timer()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_mode_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.authoring_panel = AuthoringPanel(
            self.quiz_manager,
            self.owner_id,
            self.participant_url,
            on_saved=self._handle_quiz_saved,
            parent=self,
        )
        self.quiz_list_panel = QuizListPanel(
            self.quiz_manager,
            self.owner_id,
            self.participant_url,
            on_edit_quiz=self._handle_edit_quiz,
            on_show_results=self._handle_show_results,
            parent=self,
        )
        self.results_panel = ResultsPanel(self.quiz_manager, self)

        self.mode_stack.addWidget(self.authoring_panel)
        self.mode_stack.addWidget(self.quiz_list_panel)
        self.mode_stack.addWidget(self.results_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(HostMode.AUTHORING)

    def _build_mode_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.create_mode_button = QPushButton(MODE_BUTTON_CREATE, self)
        self.create_mode_button.setCheckable(True)
        self.create_mode_button.clicked.connect(lambda: self._set_mode(HostMode.AUTHORING))
        button_row.addWidget(self.create_mode_button)

        self.list_mode_button = QPushButton(MODE_BUTTON_LIST, self)
        self.list_mode_button.setCheckable(True)
        self.list_mode_button.clicked.connect(self._handle_list_mode)
        button_row.addWidget(self.list_mode_button)

        button_row.addStretch()

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(lambda: show_info(self, f"{APP_NAME} Help", HELP_TEXT))
        button_row.addWidget(self.help_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(RESULTS_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == HostMode.RESULTS:
            self.results_panel.refresh()

    def _set_mode(self, mode: HostMode) -> None:
        self._mode = mode
        self.create_mode_button.setChecked(mode == HostMode.AUTHORING)
        self.list_mode_button.setChecked(mode in (HostMode.QUIZ_LIST, HostMode.RESULTS))
        index_map = {
            HostMode.AUTHORING: 0,
            HostMode.QUIZ_LIST: 1,
            HostMode.RESULTS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    def _handle_list_mode(self) -> None:
        self.quiz_list_panel.refresh()
        self._set_mode(HostMode.QUIZ_LIST)

    def _handle_quiz_saved(self, quiz: Quiz) -> None:
        if quiz.is_published:
            self.quiz_list_panel.refresh()

    def _handle_edit_quiz(self, quiz: Quiz) -> None:
        if not self.authoring_panel.check_unsaved_changes():
            return
        self.authoring_panel.load_quiz(quiz)
        self._set_mode(HostMode.AUTHORING)

    def _handle_show_results(self, quiz: Quiz) -> None:
        self.results_panel.show_quiz(quiz)
        self._set_mode(HostMode.RESULTS)

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)
