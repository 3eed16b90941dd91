"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizCode Host Console"
PARTICIPANT_URL_PLACEHOLDER: str = "http://<host-ip>:8000/"
RESULTS_REFRESH_INTERVAL_MS: int = 2000

MODE_BUTTON_CREATE: str = "Create Quiz"
MODE_BUTTON_LIST: str = "My Quizzes"

PLACEHOLDER_TITLE: str = "Quiz title"
PLACEHOLDER_DESCRIPTION: str = "Quiz description (optional, supports Markdown)."
PLACEHOLDER_QUESTION: str = "Enter your question text (supports Markdown)."

AUTHOR_ADD_QUESTION_BUTTON: str = "Add Question"
AUTHOR_REMOVE_QUESTION_BUTTON: str = "Remove Question"
AUTHOR_PREV_BUTTON: str = "Previous Question"
AUTHOR_NEXT_BUTTON: str = "Next Question"
AUTHOR_ADD_OPTION_BUTTON: str = "Add Option"
AUTHOR_SAVE_DRAFT_BUTTON: str = "Save Draft"
AUTHOR_PUBLISH_BUTTON: str = "Publish"
AUTHOR_NEW_QUIZ_BUTTON: str = "New Quiz"

LIST_REFRESH_BUTTON: str = "Refresh"
LIST_EDIT_BUTTON: str = "Edit Draft"
LIST_COPY_LINK_BUTTON: str = "Copy Share Link"
LIST_RESULTS_BUTTON: str = "View Results"
LIST_DELETE_BUTTON: str = "Delete Quiz"
LIST_EMPTY_STATE: str = "You have not created any quizzes yet."

RESULTS_EXPORT_BUTTON: str = "Export Results"
RESULTS_EMPTY_STATE: str = "No results yet. Share the quiz code and wait for participants."
EXPORT_DIALOG_TITLE: str = "Export results"
EXPORT_FILE_FILTER: str = "CSV files (*.csv);;All files (*.*)"

NO_QUIZ_SELECTED_MESSAGE: str = "Select a quiz first."
QUIZ_SAVED_MESSAGE: str = "Draft saved."
