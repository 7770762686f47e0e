"""AI Tutor server entry point.

Serves the tutor API and the NiceGUI chat pages from one uvicorn process.
Settings come from the environment (and ``.env``): ``HOST``, ``PORT``,
``LOG_LEVEL`` and ``NICEGUI_STORAGE_SECRET``.
"""

import logging
import os
import sys

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

DEFAULT_STORAGE_SECRET = "ai-tutor-secret"


def server_settings() -> dict[str, str | int]:
    """uvicorn host, port and log level from the environment."""
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8000")),
        "log_level": os.getenv("LOG_LEVEL", "info").lower(),
    }


def build_app() -> FastAPI:
    """Create the API app with the chat pages mounted on it."""
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page, login_page  # noqa: F401 - registers the pages

    app = create_app()

    storage_secret = os.getenv("NICEGUI_STORAGE_SECRET") or DEFAULT_STORAGE_SECRET
    if storage_secret == DEFAULT_STORAGE_SECRET:
        logger.warning("NICEGUI_STORAGE_SECRET not set, using the development secret")

    ui.run_with(
        app,
        title="AI Tutor",
        favicon="🎓",
        storage_secret=storage_secret,
    )
    return app


def main() -> None:
    """Start the server."""
    import uvicorn

    settings = server_settings()
    app = build_app()

    base = f"http://localhost:{settings['port']}"
    logger.info(f"AI Tutor chat on {base}/ (API docs at {base}/docs)")

    uvicorn.run(app, **settings)


if __name__ == "__main__":
    main()
