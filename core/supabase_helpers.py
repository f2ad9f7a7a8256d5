# core/supabase_helpers.py

from typing import Any, Dict, List, Optional

from core.errors import UpstreamFailure, upstream_failure
from core.supabase_client import get_supabase_client


# =================================================================
#  TABLE ACCESS WRAPPER
# =================================================================
# Thin, read-mostly access to the PostgREST tables behind the
# access-control core:
#   - plans / features / plan_features
#   - profiles / profile_object_permissions / profile_field_permissions
#   - organizations / subscriptions / users / notifications
#
# Every client fault raises UpstreamFailure. A failed lookup is
# never reported as "no rows".
# =================================================================

def _client():
    client = get_supabase_client()
    if client is None:
        raise UpstreamFailure("Supabase client not configured")
    return client


def _apply_eq(query, eq: Optional[Dict[str, Any]]):
    """Apply equality filters; None values become IS NULL."""
    for key, val in (eq or {}).items():
        if val is None:
            query = query.is_(key, "null")
        else:
            query = query.eq(key, val)
    return query


def select(
    table: str,
    eq: Optional[Dict[str, Any]] = None,
    *,
    columns: str = "*",
    order_by: Optional[str] = None,
    ascending: bool = True,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """SELECT rows matching every `eq` filter."""
    client = _client()

    try:
        query = _apply_eq(client.table(table).select(columns), eq)
        if order_by:
            query = query.order(order_by, desc=not ascending)
        if limit:
            query = query.limit(limit)

        result = query.execute()
        return result.data or []

    except Exception as e:
        raise upstream_failure(e, f"Failed to fetch from {table}") from e


def select_one(
    table: str,
    eq: Optional[Dict[str, Any]] = None,
    *,
    columns: str = "*",
) -> Optional[Dict[str, Any]]:
    """First row matching `eq`, or None."""
    rows = select(table, eq, columns=columns, limit=1)
    return rows[0] if rows else None


def count(table: str, eq: Optional[Dict[str, Any]] = None) -> int:
    """Exact row count for `eq`."""
    client = _client()

    try:
        query = _apply_eq(client.table(table).select("id", count="exact"), eq)
        result = query.execute()
        if result.count is not None:
            return result.count
        return len(result.data or [])

    except Exception as e:
        raise upstream_failure(e, f"Failed to count {table}") from e


def safe_insert(table: str, data: dict) -> Optional[Dict[str, Any]]:
    """INSERT one row and return the stored representation."""
    client = _client()

    try:
        result = (
            client.table(table)
            .insert(data, returning="representation")
            .execute()
        )
        return result.data[0] if result.data else None

    except Exception as e:
        raise upstream_failure(e, f"Failed to insert into {table}") from e


def safe_update(table: str, filters: dict, data: dict) -> Optional[Dict[str, Any]]:
    """UPDATE rows matching `filters` and return the first updated row."""
    client = _client()

    try:
        query = _apply_eq(
            client.table(table).update(data, returning="representation"),
            filters,
        )
        result = query.execute()
        return result.data[0] if result.data else None

    except Exception as e:
        raise upstream_failure(e, f"Failed to update {table}") from e
