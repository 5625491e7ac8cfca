# shopflow/core/logging_config.py
import logging

from shopflow.core.config import get_settings


def configure_logging() -> None:
    """
    Configure root logging once at app start.

    Level comes from LOG_LEVEL; uvicorn keeps its own handlers.
    """
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("shopflow").setLevel(level)
