# core/super_admin.py

"""
Super-admin override.

A separate predicate over the users table, checked before any
organization-scoped resolution on admin routes. Never consults
profile permission rows.
"""

from typing import Optional

from core.permissions import GLOBAL_ADMIN_PROFILE_NAME
from core.supabase_helpers import select_one


def is_super_admin(user_id: Optional[str]) -> bool:
    if not user_id:
        return False

    row = select_one("users", {"id": user_id}, columns="id, is_super_admin")
    return bool(row) and row.get("is_super_admin") is True


def is_global_admin(profile_id: Optional[str]) -> bool:
    """Profile named "Global Administrator" that belongs to no organization."""
    if not profile_id:
        return False

    row = select_one("profiles", {"id": profile_id}, columns="id, name, organization_id")
    return (
        bool(row)
        and row.get("name") == GLOBAL_ADMIN_PROFILE_NAME
        and row.get("organization_id") is None
    )
