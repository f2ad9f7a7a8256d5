# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "samba"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Single application logger; denials at INFO, upstream faults at ERROR."""
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(_resolve_level(level))

    # uvicorn --reload re-imports modules; keep one handler
    if not app_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)

    return app_logger


logger = setup_logger()
