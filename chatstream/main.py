"""Main application entry point.

Integrated mode (default) serves the API and the NiceGUI chat page from one
uvicorn server on PORT. Separate mode runs the chat page on UI_PORT as its own
process, pointed at the API through API_BASE_URL.
Environment variables are loaded from .env file.
"""

import logging
import os
import subprocess
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8080"))


def run_integrated() -> None:
    """Serve the API and the chat page from one process.

    The chat page reaches the API over HTTP on the same port unless
    API_BASE_URL says otherwise.
    """
    import uvicorn
    from nicegui import ui

    os.environ.setdefault("API_BASE_URL", f"http://localhost:{PORT}")

    from chatstream.api.app import create_app
    from chatstream.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="Chat AI",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chatstream-secret"),
    )

    logger.info(f"Chat UI available at http://localhost:{PORT}/")
    uvicorn.run(app, host=HOST, port=PORT, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API on PORT and the chat page on UI_PORT as two processes.

    Stops both as soon as either one exits.
    """
    api_url = os.getenv("API_BASE_URL", f"http://localhost:{PORT}")
    ui_env = {**os.environ, "API_BASE_URL": api_url, "UI_PORT": str(UI_PORT)}

    logger.info(f"Starting API on port {PORT}, chat UI on port {UI_PORT} using {api_url}")
    procs = [
        subprocess.Popen(
            [sys.executable, "-m", "uvicorn", "chatstream.api.app:app",
             "--host", HOST, "--port", str(PORT)]
        ),
        subprocess.Popen([sys.executable, "-m", "chatstream.ui.chat_page"], env=ui_env),
    ]
    try:
        while all(proc.poll() is None for proc in procs):
            try:
                procs[0].wait(timeout=1)
            except subprocess.TimeoutExpired:
                pass
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in procs:
            proc.terminate()
            proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the UI on different ports.
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting chatstream in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
