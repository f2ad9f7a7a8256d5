# routers/organization.py

from fastapi import APIRouter, Depends, HTTPException

from core.logging_config import logger
from core.organizations import build_security_context, get_organization_usage
from core.permission_helpers import requires_object_permission
from core.plan_features import get_enabled_plan_features, get_plan_limits
from dependencies.auth import get_current_user, CurrentUser
from models.enums import Action


router = APIRouter(
    prefix="/organization",
    tags=["Organization"],
)


# -----------------------------------------------------
# GET /organization/plan
# Plan name, limits, enabled features and current usage
# -----------------------------------------------------
@router.get("/plan", summary="Current organization plan")
def get_current_plan(current_user: CurrentUser = Depends(get_current_user)):
    context = build_security_context(current_user)
    if context is None:
        logger.warning(f"404: organization not found for user {current_user.id}")
        raise HTTPException(404, "Organization not found")

    if not context.plan_name:
        raise HTTPException(404, "Failed to fetch plan")

    limits = get_plan_limits(context.plan_name)
    if limits is None:
        raise HTTPException(404, f"Plan {context.plan_name} not found")

    return {
        "organization_id": context.organization_id,
        "plan_name": context.plan_name,
        "limits": limits.model_dump(),
        "features": sorted(get_enabled_plan_features(context.plan_name)),
        "usage": get_organization_usage(context.organization_id),
    }


# -----------------------------------------------------
# GET /organization/usage
# Counts against the plan limits; needs Organization:read
# -----------------------------------------------------
@router.get("/usage", summary="Current organization usage")
def get_current_usage(
    current_user: CurrentUser = Depends(requires_object_permission("Organization", Action.read)),
):
    return {
        "organization_id": current_user.organization_id,
        "usage": get_organization_usage(current_user.organization_id),
    }
