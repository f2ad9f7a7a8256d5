# core/plan_features.py

"""
Plan / feature entitlement lookups.

Tables:
    plans          (id, name, display_name, max_properties, max_users, max_tenants, ...)
    features       (id, name = feature key, display_name, category, is_active)
    plan_features  (plan_id, feature_id, is_enabled, limits)
"""

from typing import Any, Dict, Iterable, List, Optional, Set

from core.logging_config import logger
from core.supabase_helpers import safe_insert, safe_update, select, select_one
from models.plan import Feature, FeatureStatus, Plan, PlanFeature, PlanLimits


UNLIMITED = -1


# ============================================================
# Plans
# ============================================================

def get_plan(plan_name: str) -> Optional[Plan]:
    row = select_one("plans", {"name": plan_name})
    if not row:
        logger.warning(f"Plan not found: {plan_name}")
        return None
    return Plan(**row)


def get_all_plans() -> List[Plan]:
    rows = select("plans", {"is_active": True}, order_by="sort_order")
    return [Plan(**row) for row in rows]


def _limit(value: Optional[int]) -> int:
    return UNLIMITED if value is None else value


def get_plan_limits(plan_name: str) -> Optional[PlanLimits]:
    """Plan-wide caps (lots / users / extranet tenants); None if plan missing."""
    plan = get_plan(plan_name)
    if plan is None:
        return None

    return PlanLimits(
        lots=_limit(plan.max_properties),
        users=_limit(plan.max_users),
        extranet_tenants=_limit(plan.max_tenants),
    )


# ============================================================
# Features
# ============================================================

def get_feature(feature_key: str) -> Optional[Feature]:
    row = select_one("features", {"name": feature_key})
    return Feature(**row) if row else None


def get_all_features() -> List[Feature]:
    rows = select("features", {"is_active": True}, order_by="category")
    return [Feature(**row) for row in rows]


def get_plan_feature(plan: Plan, feature: Feature) -> Optional[PlanFeature]:
    row = select_one("plan_features", {"plan_id": plan.id, "feature_id": feature.id})
    return PlanFeature(**row) if row else None


def is_feature_enabled_for_plan(plan: Plan, feature_key: str) -> bool:
    """
    Enabled only when the feature exists, is active, and the plan has a
    plan_features row with is_enabled = true.
    """
    feature = get_feature(feature_key)
    if feature is None or feature.is_active is False:
        return False

    plan_feature = get_plan_feature(plan, feature)
    return plan_feature is not None and plan_feature.is_enabled


def is_feature_enabled(plan_name: str, feature_key: str) -> bool:
    plan = get_plan(plan_name)
    if plan is None:
        return False
    return is_feature_enabled_for_plan(plan, feature_key)


def _enabled_plan_feature_rows(plan: Plan) -> List[PlanFeature]:
    rows = select("plan_features", {"plan_id": plan.id, "is_enabled": True})
    return [PlanFeature(**row) for row in rows]


def get_enabled_plan_features(plan_name: str) -> Set[str]:
    """Feature keys enabled for a plan (empty when the plan is unknown)."""
    plan = get_plan(plan_name)
    if plan is None:
        return set()

    enabled_ids = {pf.feature_id for pf in _enabled_plan_feature_rows(plan)}
    return {f.name for f in get_all_features() if f.id in enabled_ids}


def get_plan_features_with_status(plan_name: str) -> List[FeatureStatus]:
    """Every active feature with its enabled flag and limits for the plan."""
    plan = get_plan(plan_name)
    if plan is None:
        return []

    plan_rows: Dict[str, PlanFeature] = {
        row["feature_id"]: PlanFeature(**row)
        for row in select("plan_features", {"plan_id": plan.id})
    }

    statuses = []
    for feature in get_all_features():
        pf = plan_rows.get(feature.id)
        statuses.append(
            FeatureStatus(
                key=feature.name,
                name=feature.display_name,
                category=feature.category,
                is_enabled=bool(pf and pf.is_enabled),
                limits=pf.limits if pf else {},
            )
        )
    return statuses


# ============================================================
# Visibility
# ============================================================

def check_plan_features(plan_name: str, feature_keys: Iterable[str]) -> Dict[str, bool]:
    """Enabled flag per requested key, from one read of the plan's features."""
    enabled = get_enabled_plan_features(plan_name)
    return {key: key in enabled for key in feature_keys}


def filter_by_plan(
    items: Iterable[Dict[str, Any]],
    plan_name: str,
    key: str = "feature_key",
) -> List[Dict[str, Any]]:
    """
    Keep the items (navigation entries, menu sections, ...) whose feature is
    enabled for the plan. Items without a feature key are always kept.
    """
    enabled = get_enabled_plan_features(plan_name)
    return [item for item in items if not item.get(key) or item[key] in enabled]


def get_feature_categories_visibility(plan_name: str) -> Dict[str, Dict[str, List[str]]]:
    """Active features grouped by category: {category: {enabled: [...], disabled: [...]}}."""
    categories: Dict[str, Dict[str, List[str]]] = {}
    for status in get_plan_features_with_status(plan_name):
        bucket = categories.setdefault(status.category or "other", {"enabled": [], "disabled": []})
        bucket["enabled" if status.is_enabled else "disabled"].append(status.key)
    return categories


# ============================================================
# Feature limits
# ============================================================

def get_feature_limit(plan_name: str, feature_key: str, limit_name: str) -> Optional[int]:
    """
    Numeric limit stored on the plan_features row.
    None = unlimited (missing, null or -1). A disabled feature has limit 0.
    """
    plan = get_plan(plan_name)
    feature = get_feature(feature_key)
    if plan is None or feature is None:
        return 0

    plan_feature = get_plan_feature(plan, feature)
    if plan_feature is None or not plan_feature.is_enabled:
        return 0

    value = plan_feature.limits.get(limit_name)
    if value is None:
        return None

    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid limit {limit_name}={value!r} for {feature_key} on plan {plan_name}"
        )
        return 0

    return None if value == UNLIMITED else value


def is_within_feature_limit(
    plan_name: str,
    feature_key: str,
    limit_name: str,
    current_count: int,
) -> bool:
    """True if one more item fits under the limit."""
    limit = get_feature_limit(plan_name, feature_key, limit_name)
    if limit is None:
        return True
    return current_count < limit


# ============================================================
# Admin writes
# ============================================================

def set_plan_feature(plan_name: str, feature_key: str, is_enabled: bool) -> bool:
    """Enable/disable a feature for a plan. False if plan or feature is unknown."""
    plan = get_plan(plan_name)
    if plan is None:
        return False

    feature = get_feature(feature_key)
    if feature is None:
        logger.warning(f"Feature not found: {feature_key}")
        return False

    existing = get_plan_feature(plan, feature)
    if existing is None:
        safe_insert("plan_features", {
            "plan_id": plan.id,
            "feature_id": feature.id,
            "is_enabled": is_enabled,
        })
    else:
        safe_update("plan_features", {"id": existing.id}, {"is_enabled": is_enabled})

    logger.info(f"Plan {plan_name}: feature {feature_key} set to {is_enabled}")
    return True
