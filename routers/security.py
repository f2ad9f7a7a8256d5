# routers/security.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from core.access_resolver import check_access
from core.errors import UpstreamFailure
from core.logging_config import logger
from core.organizations import build_security_context
from core.permission_helpers import decide_for_user
from core.profiles import filter_readable_fields
from dependencies.auth import get_current_user, CurrentUser
from models.access import AccessCheckRequest, AccessDecision, AccessRequest, FieldFilterRequest
from models.enums import Action


router = APIRouter(
    prefix="/security",
    tags=["Security"],
)


def _decision_response(status_code: int, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"allowed": False, "reason": reason},
    )


# -----------------------------------------------------
# POST /security/check
# Resolve one capability for the authenticated caller
# -----------------------------------------------------
@router.post(
    "/check",
    summary="Check access to a feature, object action or field",
    response_model=AccessDecision,
    response_model_exclude_none=True,
)
def check_security(
    payload: AccessCheckRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Identity (organization, profile, plan) comes from the caller, never
    from the body.

    - 200 with {allowed, reason, failedLevel?} on a decision
    - 404 if the caller's organization does not resolve
    - 500 on an upstream or unexpected fault, same body shape
    """
    try:
        context = build_security_context(current_user)
        if context is None:
            logger.warning(f"404: organization not found for user {current_user.id}")
            return _decision_response(404, "Organization not found")

        request = AccessRequest(
            **payload.model_dump(),
            user_id=context.user_id,
            organization_id=context.organization_id,
            profile_id=context.profile_id,
            plan_name=context.plan_name,
        )
        return check_access(request)

    except UpstreamFailure as e:
        logger.error(f"Security check failed for user {current_user.id}: {e}")
        return _decision_response(500, "Internal server error")

    except Exception:
        logger.error(f"Unexpected error in security check for user {current_user.id}", exc_info=True)
        return _decision_response(500, "Internal server error")


# -----------------------------------------------------
# POST /security/filter-fields
# Strip the fields of a record the caller's profile cannot read
# -----------------------------------------------------
@router.post("/filter-fields", summary="Remove unreadable fields from a record")
def filter_fields(
    payload: FieldFilterRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    """403 when the object itself is not readable; otherwise the filtered record."""
    decision = decide_for_user(current_user, object_type=payload.object_type, action=Action.read)
    if not decision.allowed:
        logger.warning(f"403: {decision.reason} (user {current_user.id})")
        raise HTTPException(403, decision.reason)

    return filter_readable_fields(current_user.profile_id, payload.object_type, payload.record)
