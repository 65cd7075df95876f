"""
Process entry point for the Customers API.

Loads environment variables from ``.env`` and serves ``src.main:app`` with
uvicorn. Migrations are applied by the application's startup hook before
the listener accepts traffic.

Usage:
    python app.py
"""

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from src.main import app  # noqa: E402
from src.utils.config import get_settings  # noqa: E402
from src.utils.logger import get_logger  # noqa: E402

logger = get_logger(__name__)

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    logger.info(f"Starting Customers API on {settings.HOST}:{settings.PORT} (reload={settings.RELOAD})")

    uvicorn.run(
        "src.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower()
    )
