from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Samba Access API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_URL: Optional[str] = None

    FRONTEND_DOMAINS: List[str] = [
        "https://sambasys.com",
        "https://www.sambasys.com",
        "https://app.sambasys.com",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # PostgREST request timeout; a hung lookup becomes an upstream failure
    SUPABASE_TIMEOUT_SECONDS: int = 10

    # -------------------------------------------------
    # Plans
    # -------------------------------------------------
    # Plan used when an organization has no subscription at all
    DEFAULT_PLAN_NAME: str = "freemium"

    # -------------------------------------------------
    # Admin notifications
    # -------------------------------------------------
    ADMIN_NOTIFICATIONS_LIMIT: int = 100

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    # No env_file: the host provides REAL environment variables
    model_config = SettingsConfigDict(case_sensitive=True)


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add the configured frontend URL
if settings.FRONTEND_URL:
    domain = settings.FRONTEND_URL
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add the public app domains
cors_origins.extend([d.rstrip("/") for d in settings.FRONTEND_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
