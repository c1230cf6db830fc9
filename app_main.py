"""Application entry point for the EcoTrivia session server."""

from __future__ import annotations

from trivia_app.constants.about import APP_NAME
from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.core.services.question_catalogue import QuestionCatalogue
from trivia_app.core.session_store import SessionStore
from trivia_app.server.api_server import run_api_server
from trivia_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, load the catalogue and serve the session API."""
    logger = configure_logging()
    logger.info("Starting %s…", APP_NAME)

    catalogue = QuestionCatalogue()
    logger.info("Loaded %d questions in %d categories", catalogue.get_question_count(), len(catalogue.categories()))

    store = SessionStore(repository=catalogue)
    logger.info("Session API listening on http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)
    run_api_server(store, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
