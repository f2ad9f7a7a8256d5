# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client, ClientOptions
from core.config import settings
from core.logging_config import logger


# Tables probed by /health/db
HEALTH_TABLES = ["plans", "features", "profiles", "profile_object_permissions"]


# ============================================================
# Supabase Client Factory (service role)
# ============================================================

def get_supabase_client() -> Optional[Client]:
    """
    Service-role client, used for:
        - auth.get_user (bearer token validation)
        - plan / feature / profile reads across organizations
        - profile permission and plan feature writes

    Built per call with a PostgREST timeout, so a permission change is
    visible on the next request and a hung query surfaces as a fault.
    Returns None when credentials are not configured.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.error(
            "Supabase not configured "
            f"(URL: {'SET' if settings.SUPABASE_URL else 'MISSING'}, "
            f"SERVICE ROLE KEY: {'SET' if settings.SUPABASE_SERVICE_ROLE_KEY else 'MISSING'})"
        )
        return None

    try:
        return create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            options=ClientOptions(postgrest_client_timeout=settings.SUPABASE_TIMEOUT_SECONDS),
        )
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Connectivity probe for health checks
# ============================================================

def ping_supabase(tables=None) -> dict:
    """One-row read per access-control table; never raises."""
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured", "tables": {}}

    results = {}
    for table in tables or HEALTH_TABLES:
        try:
            res = client.table(table).select("id").limit(1).execute()
            results[table] = {"status": "ok", "rows_found": len(res.data or [])}
        except Exception as err:
            logger.error(f"Health probe failed on {table}: {err}")
            results[table] = {"status": "error", "detail": str(err)}

    failed = any(r["status"] == "error" for r in results.values())
    return {
        "service": "Supabase",
        "status": "degraded" if failed else "ok",
        "tables": results,
    }
