"""EcoChat launcher.

Modes (``RUN_MODE``):
    integrated  session store API and chat page served by one uvicorn process
    separate    API on port 8000 and chat page on port 8080, as two processes
    api         session store API only
    ui          chat page only, talking to ``ECOCHAT_API_URL``
"""

import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

API_PORT = int(os.getenv("PORT", "8000"))
HOST = os.getenv("HOST", "0.0.0.0")


def run_api() -> None:
    """Serve the session store API on its own."""
    import uvicorn

    logger.info(f"Session store API on http://localhost:{API_PORT} (docs at /docs)")
    uvicorn.run(
        "ecochat.api.app:app",
        host=HOST,
        port=API_PORT,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_ui() -> None:
    from ecochat.ui.chat_page import main as ui_main

    ui_main()


def run_integrated() -> None:
    """Mount the chat page on the API application and serve both."""
    import uvicorn
    from nicegui import ui

    from ecochat.api.app import create_app
    from ecochat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="EcoChat Assistant",
        favicon="♻️",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "ecochat-secret"),
    )

    logger.info(f"Chat UI and session store on http://localhost:{API_PORT}/")
    uvicorn.run(
        app,
        host=HOST,
        port=API_PORT,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Start the API and the chat page as child processes and wait for either to exit."""
    import subprocess
    import time

    env = {**os.environ, "RUN_MODE": "api"}
    api_proc = subprocess.Popen([sys.executable, "-m", "ecochat.main"], env=env)
    ui_proc = subprocess.Popen(
        [sys.executable, "-m", "ecochat.main"], env={**os.environ, "RUN_MODE": "ui"}
    )
    logger.info(f"Started API (pid {api_proc.pid}) and chat UI (pid {ui_proc.pid})")

    try:
        while api_proc.poll() is None and ui_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in (api_proc, ui_proc):
            proc.terminate()
            proc.wait()


RUNNERS = {
    "integrated": run_integrated,
    "separate": run_separate,
    "api": run_api,
    "ui": run_ui,
}


def main() -> None:
    mode = os.getenv("RUN_MODE", "integrated").lower()
    runner = RUNNERS.get(mode)
    if runner is None:
        logger.error(f"Unknown RUN_MODE {mode!r}, expected one of {sorted(RUNNERS)}")
        sys.exit(2)
    logger.info(f"Starting EcoChat in {mode} mode")
    runner()


if __name__ == "__main__":
    main()
