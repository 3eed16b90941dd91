"""Application entry point for the QuizCode host console."""

from __future__ import annotations

import getpass
import socket
import sys

from PySide6.QtWidgets import QApplication

from quizcode.constants.about import APP_NAME
from quizcode.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizcode.core.quiz_manager import QuizManager
from quizcode.core.services.catalog_store import InMemoryCatalogStore
from quizcode.server.api_server import start_api_server
from quizcode.ui import HostMainWindow
from quizcode.utils.logging_config import configure_logging


def _determine_participant_url(port: int) -> str:
    """Best-effort determination of the local IP for participant-facing links."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the participant API, and launch the host console."""
    logger = configure_logging()
    logger.info("Starting %s host console", APP_NAME)

    quiz_manager = QuizManager(InMemoryCatalogStore())
    start_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    participant_url = _determine_participant_url(DEFAULT_PORT)
    logger.info("Participant page available at %s", participant_url)

    app = QApplication(sys.argv)
    window = HostMainWindow(
        quiz_manager=quiz_manager,
        owner_id=getpass.getuser(),
        participant_url=participant_url,
    )
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
