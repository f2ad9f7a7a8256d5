from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.errors import UpstreamFailure
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.supabase_helpers import select_one


# auto_error=False: a missing header is a 401 we raise ourselves
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# Current User Model (backend identity)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # users.id (auth UID while onboarding)
    auth_user_id: str               # Supabase Auth UID
    email: str
    role: Optional[str] = None

    organization_id: Optional[str] = None
    profile_id: Optional[str] = None
    is_super_admin: bool = False
    is_active: bool = True


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_user_row(auth_user_id: str) -> Optional[dict]:
    """users row by sb_user_id, falling back to id."""
    row = select_one("users", {"sb_user_id": auth_user_id})
    if row:
        return row
    return select_one("users", {"id": auth_user_id})


# ============================================================
# AUTH DECODING (Supabase: validates JWT + loads users row)
# ============================================================
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:

    if not credentials or not credentials.credentials:
        raise _unauthorized()

    token = credentials.credentials

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise _unauthorized()
        auth_user = auth_resp.user
    except HTTPException:
        raise
    except Exception as e:
        logger.warning(f"Token validation failed: {e}")
        raise _unauthorized()

    if not auth_user.email:
        raise _unauthorized()

    # ---------------------------------------------------------
    # Application identity
    # ---------------------------------------------------------
    row = _load_user_row(auth_user.id)

    if row is None:
        # Authenticated but not onboarded yet: no organization, no profile
        return CurrentUser(
            id=auth_user.id,
            auth_user_id=auth_user.id,
            email=auth_user.email,
        )

    return CurrentUser(
        id=row["id"],
        auth_user_id=auth_user.id,
        email=row.get("email") or auth_user.email,
        role=row.get("role"),
        organization_id=row.get("organization_id"),
        profile_id=row.get("profile_id"),
        is_super_admin=row.get("is_super_admin") is True,
        is_active=row.get("is_active") is not False,
    )


# ============================================================
# OPTIONAL AUTHENTICATION (for hybrid endpoints)
# ============================================================
def get_optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[CurrentUser]:
    """
    Returns CurrentUser if a valid token is provided, None otherwise.
    An identity that cannot be loaded reads as anonymous.
    """
    if not credentials:
        return None

    try:
        return get_current_user(credentials)
    except HTTPException:
        return None
    except UpstreamFailure as e:
        logger.warning(f"Optional auth: identity lookup failed: {e}")
        return None
