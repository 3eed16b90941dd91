"""Qt UI components for the host console."""

from .dialog_helpers import (
    confirm_delete_quiz,
    confirm_discard_changes,
    confirm_remove_question,
    show_error,
    show_info,
    show_share_link,
    show_warning,
)
from .host_main_window import HostMainWindow

__all__ = [
    "HostMainWindow",
    "confirm_delete_quiz",
    "confirm_discard_changes",
    "confirm_remove_question",
    "show_error",
    "show_info",
    "show_share_link",
    "show_warning",
]
