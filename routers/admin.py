# routers/admin.py

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.config import settings
from core.errors import UpstreamFailure
from core.logging_config import logger
from core.organizations import get_organization
from core.permission_helpers import require_super_admin
from core.plan_features import (
    get_all_features,
    get_plan,
    get_plan_features_with_status,
    set_plan_feature,
)
from core.profiles import create_default_profiles
from core.super_admin import is_global_admin, is_super_admin
from core.supabase_helpers import count, safe_update, select
from dependencies.auth import get_current_user, get_optional_auth, CurrentUser
from models.plan import Feature, FeatureStatus, PlanFeaturesUpdate
from models.profile import Profile


# Per-endpoint behaviour for callers who are not super-admin:
#   check-super-admin            quiet default (both flags false)
#   notifications/unread-count   quiet default (0), also on lookup fault
#   everything else              403
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


# -----------------------------------------------------
# Payloads
# -----------------------------------------------------
class MarkReadRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    notification_id: Optional[str] = None


# -----------------------------------------------------
# GET /admin/check-super-admin
# -----------------------------------------------------
@router.get("/check-super-admin", summary="Is the caller a super-admin?")
def check_super_admin(current_user: Optional[CurrentUser] = Depends(get_optional_auth)):
    """Never fails: anonymous callers and lookup faults get both flags false."""
    quiet = {"is_super_admin": False, "is_global_admin": False}
    if current_user is None:
        return quiet

    try:
        return {
            "is_super_admin": is_super_admin(current_user.id),
            "is_global_admin": is_global_admin(current_user.profile_id),
        }

    except UpstreamFailure as e:
        logger.error(f"Super-admin check failed for {current_user.id}: {e}")
        return quiet


# ============================================================
# NOTIFICATIONS
# ============================================================

@router.get("/notifications", summary="Super-admin notifications")
def list_notifications(current_user: CurrentUser = Depends(require_super_admin)):
    notifications = select(
        "notifications",
        {"user_id": current_user.id},
        order_by="created_at",
        ascending=False,
        limit=settings.ADMIN_NOTIFICATIONS_LIMIT,
    )
    return {"notifications": notifications}


@router.get("/notifications/unread-count", summary="Unread super-admin notifications")
def unread_notification_count(current_user: CurrentUser = Depends(get_current_user)):
    try:
        if not is_super_admin(current_user.id):
            return {"unread_count": 0}

        return {
            "unread_count": count(
                "notifications",
                {"user_id": current_user.id, "read_at": None},
            )
        }

    except UpstreamFailure as e:
        logger.error(f"Unread count lookup failed for {current_user.id}: {e}")
        return {"unread_count": 0}


@router.post("/notifications/mark-read", summary="Mark super-admin notifications read")
def mark_notifications_read(
    payload: Optional[MarkReadRequest] = Body(default=None),
    current_user: CurrentUser = Depends(require_super_admin),
):
    """One notification when notificationId is given, otherwise every unread one."""
    now = datetime.now(timezone.utc).isoformat()

    if payload and payload.notification_id:
        filters = {"id": payload.notification_id, "user_id": current_user.id}
    else:
        filters = {"user_id": current_user.id, "read_at": None}

    safe_update("notifications", filters, {"read_at": now})
    return {"success": True}


# ============================================================
# FEATURES / PLAN FEATURES
# ============================================================

@router.get(
    "/features",
    summary="List active features",
    response_model=List[Feature],
    dependencies=[Depends(require_super_admin)],
)
def list_features():
    return get_all_features()


@router.get(
    "/plan-features",
    summary="Feature status for one plan",
    response_model=List[FeatureStatus],
    dependencies=[Depends(require_super_admin)],
)
def list_plan_features(plan_name: str):
    if get_plan(plan_name) is None:
        raise HTTPException(404, f"Plan {plan_name} not found")
    return get_plan_features_with_status(plan_name)


@router.put(
    "/plan-features",
    summary="Enable / disable features for a plan",
    response_model=List[FeatureStatus],
)
def update_plan_features(
    payload: PlanFeaturesUpdate,
    current_user: CurrentUser = Depends(require_super_admin),
):
    if get_plan(payload.plan_name) is None:
        raise HTTPException(404, f"Plan {payload.plan_name} not found")

    unknown = [
        key for key, enabled in payload.features.items()
        if not set_plan_feature(payload.plan_name, key, enabled)
    ]
    if unknown:
        logger.warning(f"Unknown features ignored for {payload.plan_name}: {unknown}")

    logger.info(f"Super-admin {current_user.id} updated features of plan {payload.plan_name}")
    return get_plan_features_with_status(payload.plan_name)


# ============================================================
# ORGANIZATIONS
# ============================================================

@router.post(
    "/organizations/{organization_id}/default-profiles",
    summary="Seed default profiles for an organization",
    response_model=List[Profile],
    dependencies=[Depends(require_super_admin)],
)
def seed_default_profiles(organization_id: str):
    if get_organization(organization_id) is None:
        raise HTTPException(404, "Organization not found")
    return create_default_profiles(organization_id)
