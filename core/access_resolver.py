# core/access_resolver.py

"""
AccessResolver: can this user, with this profile, under this
organization's plan, perform this action?

Three layers, evaluated in order, each able to deny on its own:

    1. plan     feature_key enabled for the organization plan
    2. profile  object permission flag for (object_type, action)
    3. field    field permission for (object_type, field_name); a missing
                row inherits the object-level decision

Fail-closed: anything that does not resolve is a denial with a reason.
Upstream faults (UpstreamFailure) are not caught here.
Nothing is cached; every call re-reads the rows it needs.
"""

from typing import Optional, Union

from core.access_levels import has_access_level_or_higher, is_action_permitted, permission_access_level
from core.logging_config import logger
from core.plan_features import get_plan, is_feature_enabled_for_plan
from core.profiles import get_field_permission, get_object_permission, get_profile
from models.access import (
    AccessDecision,
    AccessRequest,
    FieldCheck,
    PlanCheck,
    ProfileCheck,
    SecurityContext,
)
from models.enums import AccessLevel, Action, SecurityLevel


ACCESS_GRANTED = "Access granted"


def _deny(reason: str, level: SecurityLevel, request: AccessRequest, **checks) -> AccessDecision:
    logger.info(
        f"Access denied [{level.value}] user={request.user_id} "
        f"org={request.organization_id}: {reason}"
    )
    return AccessDecision(allowed=False, reason=reason, failed_level=level, **checks)


# ============================================================
# Layer 1: plan / feature
# ============================================================

def _plan_check(request: AccessRequest, enabled: bool) -> PlanCheck:
    return PlanCheck(feature_key=request.feature_key, enabled=enabled)


def _check_plan(request: AccessRequest) -> Optional[AccessDecision]:
    failed = _plan_check(request, enabled=False)

    if not request.plan_name:
        return _deny("Failed to fetch plan", SecurityLevel.plan, request, plan_check=failed)

    plan = get_plan(request.plan_name)
    if plan is None:
        return _deny(
            f"Plan {request.plan_name} not found",
            SecurityLevel.plan,
            request,
            plan_check=failed,
        )

    if not is_feature_enabled_for_plan(plan, request.feature_key):
        return _deny(
            f"Feature {request.feature_key} is not enabled in plan {request.plan_name}",
            SecurityLevel.plan,
            request,
            plan_check=failed,
        )
    return None


# ============================================================
# Layer 2: profile / object permission
# ============================================================

def _profile_check(request: AccessRequest, allowed: bool) -> ProfileCheck:
    return ProfileCheck(object_type=request.object_type, action=request.action, allowed=allowed)


def _check_profile(request: AccessRequest) -> Optional[AccessDecision]:
    failed = _profile_check(request, allowed=False)

    if not request.profile_id:
        return _deny("No profile assigned", SecurityLevel.profile, request, profile_check=failed)

    profile = get_profile(request.profile_id)
    if profile is None:
        return _deny("Profile not found", SecurityLevel.profile, request, profile_check=failed)

    if not profile.is_active:
        return _deny("Profile is inactive", SecurityLevel.profile, request, profile_check=failed)

    # Global profiles (no organization) apply everywhere
    if profile.organization_id and profile.organization_id != request.organization_id:
        return _deny(
            "Profile does not belong to this organization",
            SecurityLevel.profile,
            request,
            profile_check=failed,
        )

    permission = get_object_permission(profile.id, request.object_type)
    if not is_action_permitted(permission, request.action):
        return _deny(
            f"Profile does not allow {request.action.value} on {request.object_type}",
            SecurityLevel.profile,
            request,
            profile_check=failed,
        )
    return None


# ============================================================
# Layer 3: field permission
# ============================================================

def _field_check(request: AccessRequest, allowed: bool) -> FieldCheck:
    return FieldCheck(
        object_type=request.object_type,
        field_name=request.field_name,
        action=request.action,
        allowed=allowed,
    )


def _check_field(request: AccessRequest) -> Optional[AccessDecision]:
    field_permission = get_field_permission(
        request.profile_id,
        request.object_type,
        request.field_name,
    )
    if field_permission is None:
        return None

    action = request.action
    if action in (Action.read, Action.view_all):
        allowed = field_permission.can_read
    elif action in (Action.create, Action.edit):
        allowed = field_permission.can_read and field_permission.can_edit
    else:
        allowed = True  # delete is row-level, not field-scoped

    if not allowed:
        return _deny(
            f"Profile does not allow {action.value} on field "
            f"{request.object_type}.{request.field_name}",
            SecurityLevel.field,
            request,
            field_check=_field_check(request, allowed=False),
        )
    return None


# ============================================================
# Entry point
# ============================================================

def check_access(request: AccessRequest) -> AccessDecision:
    """Compose the active layers (short-circuit AND)."""
    if not request.organization_id:
        return _deny("Organization not found", SecurityLevel.plan, request)

    checks = {}

    if request.feature_key:
        denial = _check_plan(request)
        if denial:
            return denial
        checks["plan_check"] = _plan_check(request, enabled=True)

    if request.object_type:
        denial = _check_profile(request)
        if denial:
            return denial
        checks["profile_check"] = _profile_check(request, allowed=True)

        if request.field_name:
            denial = _check_field(request)
            if denial:
                return denial
            checks["field_check"] = _field_check(request, allowed=True)

    return AccessDecision(allowed=True, reason=ACCESS_GRANTED, **checks)


def _request(context: SecurityContext, **capability) -> AccessRequest:
    return AccessRequest(
        user_id=context.user_id,
        organization_id=context.organization_id,
        profile_id=context.profile_id,
        plan_name=context.plan_name,
        **capability,
    )


def can_perform_action(
    context: SecurityContext,
    object_type: str,
    action: Union[Action, str],
    field_name: Optional[str] = None,
) -> bool:
    decision = check_access(
        _request(context, object_type=object_type, action=action, field_name=field_name)
    )
    return decision.allowed


def can_access_feature(context: SecurityContext, feature_key: str) -> bool:
    return check_access(_request(context, feature_key=feature_key)).allowed


def has_minimum_access_level(
    profile_id: Optional[str],
    object_type: str,
    minimum: Union[AccessLevel, str],
) -> bool:
    """
    Level derived from the stored flags compared against `minimum`.
    An unrecognised minimum denies.
    """
    if not profile_id:
        return False

    try:
        minimum = AccessLevel(minimum)
    except ValueError:
        logger.warning(f"Unknown minimum access level {minimum!r} for {object_type}")
        return False

    level = permission_access_level(get_object_permission(profile_id, object_type))
    return has_access_level_or_higher(level, minimum)
