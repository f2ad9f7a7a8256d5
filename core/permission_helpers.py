from fastapi import Depends, HTTPException
from typing import Optional, Union

from dependencies.auth import get_current_user, CurrentUser
from core.access_resolver import check_access
from core.logging_config import logger
from core.organizations import build_security_context
from core.super_admin import is_global_admin, is_super_admin
from models.access import AccessDecision, AccessRequest
from models.enums import Action


# -----------------------------------------------------
# Resolve a capability for the authenticated caller
# -----------------------------------------------------
def decide_for_user(
    user: CurrentUser,
    *,
    feature_key: Optional[str] = None,
    object_type: Optional[str] = None,
    action: Optional[Union[Action, str]] = None,
    field_name: Optional[str] = None,
) -> AccessDecision:
    context = build_security_context(user)

    return check_access(
        AccessRequest(
            user_id=user.id,
            organization_id=context.organization_id if context else None,
            profile_id=context.profile_id if context else None,
            plan_name=context.plan_name if context else None,
            feature_key=feature_key,
            object_type=object_type,
            action=action,
            field_name=field_name,
        )
    )


def _forbid(decision: AccessDecision):
    logger.warning(f"403: {decision.reason}")
    raise HTTPException(status_code=403, detail=decision.reason)


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_object_permission(object_type: str, action: Union[Action, str]):
    """
    Usage:
        @router.put("/", dependencies=[Depends(requires_object_permission("Profile", "edit"))])
    """

    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        decision = decide_for_user(current_user, object_type=object_type, action=action)
        if not decision.allowed:
            _forbid(decision)
        return current_user

    return dependency


def requires_feature(feature_key: str):
    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        decision = decide_for_user(current_user, feature_key=feature_key)
        if not decision.allowed:
            _forbid(decision)
        return current_user

    return dependency


# ============================================================
# SUPER-ADMIN GUARD (checked before any resolver call)
# ============================================================

def require_super_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not is_super_admin(current_user.id):
        logger.warning(f"403: super-admin required (user {current_user.id})")
        raise HTTPException(status_code=403, detail="Super admin access required")
    return current_user


def is_platform_admin(user: CurrentUser) -> bool:
    """Super-admin or holder of the global administrator profile."""
    return is_super_admin(user.id) or is_global_admin(user.profile_id)
