# core/config_validator.py

from typing import List, Tuple
from core.config import settings
from core.logging_config import logger


# (variable, required)
CHECKED_SETTINGS: List[Tuple[str, bool]] = [
    ("SUPABASE_URL", True),
    ("SUPABASE_SERVICE_ROLE_KEY", True),
    ("SUPABASE_ANON_KEY", False),
    ("FRONTEND_URL", False),
]


def missing_settings(required: bool) -> List[str]:
    return [
        name for name, is_required in CHECKED_SETTINGS
        if is_required == required and not getattr(settings, name)
    ]


def validate_config_on_startup():
    """
    Missing required settings abort startup in production; elsewhere
    (local runs, tests) they are logged and the app starts anyway.
    """
    required = missing_settings(required=True)
    optional = missing_settings(required=False)

    if required:
        message = f"Missing required environment variables: {', '.join(required)}"
        logger.error(message)
        if settings.ENV == "production":
            raise RuntimeError(message)

    for name in optional:
        logger.warning(f"Optional configuration missing: {name}")

    if not required:
        logger.info("Configuration validation passed")
