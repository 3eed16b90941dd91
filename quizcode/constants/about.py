"""Static metadata describing QuizCode."""

APP_NAME = "QuizCode"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizCode lets you author multiple-choice quizzes, publish them with a short share code "
    "and collect results from participants who join from their browser."
)

HELP_TEXT = (
    "Create a quiz with at least one question. Every question needs two or more options "
    "and at least one option marked as correct.\n\n"
    "Save Draft keeps the quiz private. Publish assigns a six-character share code; "
    "participants open the join page, enter the code and answer each question before "
    "its timer runs out."
)
