# routers/user.py

from typing import List

from fastapi import APIRouter, Depends, Query

from core.organizations import build_security_context
from core.plan_features import (
    check_plan_features,
    get_enabled_plan_features,
    get_feature_categories_visibility,
)
from core.profiles import analyze_profile_access, get_user_object_permissions
from dependencies.auth import get_current_user, CurrentUser
from models.profile import ObjectPermission, ProfileAccessSummary


router = APIRouter(
    prefix="/user",
    tags=["User Access"],
)


# ============================================================
# GET /user/object-permissions
# ============================================================
@router.get(
    "/object-permissions",
    summary="Object permissions of the caller's profile",
    response_model=List[ObjectPermission],
)
def list_my_object_permissions(current_user: CurrentUser = Depends(get_current_user)):
    """Empty when the caller has no organization or no profile."""
    return get_user_object_permissions(current_user)


# ============================================================
# GET /user/profile-access-level
# ============================================================
@router.get(
    "/profile-access-level",
    summary="Overall access summary of the caller's profile",
    response_model=ProfileAccessSummary,
)
def my_profile_access_level(current_user: CurrentUser = Depends(get_current_user)):
    if not current_user.organization_id or not current_user.profile_id:
        return ProfileAccessSummary()

    summary = analyze_profile_access(current_user.profile_id)
    return summary or ProfileAccessSummary(profile_id=current_user.profile_id)


# ============================================================
# GET /user/plan-features
# ============================================================
@router.get("/plan-features", summary="Feature keys enabled by the caller's plan")
def my_plan_features(current_user: CurrentUser = Depends(get_current_user)):
    context = build_security_context(current_user)
    if context is None or not context.plan_name:
        return {"plan_name": None, "features": []}

    return {
        "plan_name": context.plan_name,
        "features": sorted(get_enabled_plan_features(context.plan_name)),
    }


@router.get("/plan-features/check", summary="Enabled flag for each requested feature key")
def check_my_plan_features(
    keys: List[str] = Query(..., description="Feature keys, repeated: ?keys=a&keys=b"),
    current_user: CurrentUser = Depends(get_current_user),
):
    context = build_security_context(current_user)
    if context is None or not context.plan_name:
        return {key: False for key in keys}
    return check_plan_features(context.plan_name, keys)


# ============================================================
# GET /user/feature-categories
# ============================================================
@router.get("/feature-categories", summary="Enabled / disabled features by category")
def my_feature_categories(current_user: CurrentUser = Depends(get_current_user)):
    context = build_security_context(current_user)
    if context is None or not context.plan_name:
        return {}
    return get_feature_categories_visibility(context.plan_name)
