"""Helper functions for common dialog patterns in the host UI."""

from __future__ import annotations

from PySide6.QtWidgets import QApplication, QMessageBox, QWidget


def _confirm(parent: QWidget, title: str, message: str) -> bool:
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_delete_quiz(parent: QWidget, quiz_title: str) -> bool:
    """Ask before deleting a quiz together with its questions and results.

    Args:
        parent: Parent widget for the dialog
        quiz_title: Title shown in the prompt

    Returns:
        True if user confirmed, False otherwise
    """
    return _confirm(
        parent,
        "Confirm Delete",
        f"Delete '{quiz_title}'? Its questions and all participant results will be removed.",
    )


def confirm_remove_question(parent: QWidget, question_number: int) -> bool:
    return _confirm(
        parent,
        "Confirm Remove",
        f"Are you sure you want to remove question {question_number}?",
    )


def confirm_discard_changes(parent: QWidget) -> bool:
    """Ask whether unsaved edits to the current quiz may be thrown away."""
    return _confirm(
        parent,
        "Unsaved Changes",
        "The current quiz has unsaved changes. Discard them?",
    )


def show_share_link(parent: QWidget, share_code: str, share_url: str) -> None:
    """Present the share code of a freshly published quiz and copy its link."""
    QApplication.clipboard().setText(share_url)
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle("Quiz published")
    msg_box.setText(f"Share code: {share_code}")
    msg_box.setInformativeText(
        f"Participants can join at:\n{share_url}\n\nThe link has been copied to the clipboard."
    )
    msg_box.setStandardButtons(QMessageBox.Ok)
    msg_box.exec()


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
