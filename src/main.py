"""Main application entry point.

Serves the API and the NiceGUI chat page from one uvicorn process by
default. Environment variables are loaded from a .env file.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8080"))


def use_local_api(port: int = PORT) -> str:
    """Point the chat page at the API on ``port`` unless API_BASE_URL is set.

    Must run before ``src.agent.relay`` is imported, which reads the variable once.
    """
    return os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")


def run_integrated() -> None:
    """Mount the chat page onto the FastAPI app and serve both on PORT."""
    use_local_api()

    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import APP_TITLE, chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title=APP_TITLE,
        favicon="📄",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "buddi-secret"),
    )

    logger.info(f"Chat UI on http://localhost:{PORT}/, API docs on http://localhost:{PORT}/docs")
    uvicorn.run(app, host=HOST, port=PORT, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API on PORT and the chat page on UI_PORT as two processes.

    The page reaches the API through API_BASE_URL, so only the API process
    needs the model credential.
    """
    api_cmd = [sys.executable, "-m", "uvicorn", "src.api.app:app", "--host", HOST, "--port", str(PORT)]
    ui_cmd = [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
    ui_env = {**os.environ, "API_BASE_URL": use_local_api()}
    ui_env.pop("LLM_API_KEY", None)
    ui_env.pop("OPENROUTER_API_KEY", None)

    logger.info(f"Starting API on http://localhost:{PORT} and chat UI on http://localhost:{UI_PORT}")
    processes = [subprocess.Popen(api_cmd), subprocess.Popen(ui_cmd, env=ui_env)]
    try:
        while all(p.poll() is None for p in processes):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for p in processes:
            p.terminate()
        for p in processes:
            p.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the chat page on different ports.
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting Buddi in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
