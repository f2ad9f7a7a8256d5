# routers/profiles.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.access_resolver import can_perform_action
from core.errors import InvalidPermissionWrite
from core.logging_config import logger
from core.organizations import build_security_context
from core.permission_helpers import is_platform_admin
from core.profiles import (
    get_profile,
    get_profile_field_permissions,
    get_profile_object_permissions,
    get_profiles,
    set_profile_field_permission,
    set_profile_object_permission,
    validate_field_permission_write,
    validate_object_permission_write,
)
from core.super_admin import is_super_admin
from dependencies.auth import get_current_user, CurrentUser
from models.enums import Action
from models.profile import (
    FieldPermission,
    FieldPermissionsUpdate,
    ObjectPermission,
    ObjectPermissionsUpdate,
    Profile,
)


router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
)


# -----------------------------------------------------
# Helpers
# -----------------------------------------------------
def _load_readable_profile(profile_id: str, user: CurrentUser) -> Profile:
    """Own-organization and global profiles are readable; platform admins read all."""
    profile = get_profile(profile_id)
    if profile is None:
        raise HTTPException(404, "Profile not found")

    if profile.organization_id and profile.organization_id != user.organization_id:
        if not is_platform_admin(user):
            raise HTTPException(403, "Profile belongs to another organization")

    return profile


def _require_profile_write(profile: Profile, user: CurrentUser):
    """
    Super-admins and global admins may edit any profile.
    Others need Profile:edit or Organization:edit, on a profile of their
    own organization.
    """
    if is_platform_admin(user):
        return

    if not profile.organization_id or profile.organization_id != user.organization_id:
        logger.warning(f"403: user {user.id} cannot edit profile {profile.id}")
        raise HTTPException(403, "Cannot modify a profile outside your organization")

    context = build_security_context(user)
    if context is not None and (
        can_perform_action(context, "Profile", Action.edit)
        or can_perform_action(context, "Organization", Action.edit)
    ):
        return

    logger.warning(f"403: user {user.id} lacks Profile:edit for profile {profile.id}")
    raise HTTPException(403, "Insufficient permissions to modify profile permissions")


# -----------------------------------------------------
# GET /profiles
# -----------------------------------------------------
@router.get("", summary="List profiles", response_model=List[Profile])
def list_profiles(current_user: CurrentUser = Depends(get_current_user)):
    if is_super_admin(current_user.id):
        return get_profiles(None, get_all=True)
    return get_profiles(current_user.organization_id)


# -----------------------------------------------------
# GET /profiles/{profile_id}
# -----------------------------------------------------
@router.get("/{profile_id}", summary="Get one profile", response_model=Profile)
def get_one_profile(profile_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return _load_readable_profile(profile_id, current_user)


# -----------------------------------------------------
# Object permissions
# -----------------------------------------------------
@router.get(
    "/{profile_id}/object-permissions",
    summary="List object permissions of a profile",
    response_model=List[ObjectPermission],
)
def list_object_permissions(profile_id: str, current_user: CurrentUser = Depends(get_current_user)):
    profile = _load_readable_profile(profile_id, current_user)
    return get_profile_object_permissions(profile.id)


@router.put(
    "/{profile_id}/object-permissions",
    summary="Update object permissions of a profile",
    response_model=List[ObjectPermission],
)
def update_object_permissions(
    profile_id: str,
    payload: ObjectPermissionsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    """access_level is derived from the flags; the submitted value is ignored."""
    profile = _load_readable_profile(profile_id, current_user)
    _require_profile_write(profile, current_user)

    saved = []
    try:
        for write in payload.permissions:
            validate_object_permission_write(write)
        for write in payload.permissions:
            row = set_profile_object_permission(profile.id, write)
            if row:
                saved.append(row)
    except InvalidPermissionWrite as e:
        raise HTTPException(400, str(e))

    logger.info(f"User {current_user.id} updated {len(saved)} object permissions on profile {profile.id}")
    return saved


# -----------------------------------------------------
# Field permissions
# -----------------------------------------------------
@router.get(
    "/{profile_id}/field-permissions",
    summary="List field permissions of a profile",
    response_model=List[FieldPermission],
)
def list_field_permissions(
    profile_id: str,
    object_type: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    profile = _load_readable_profile(profile_id, current_user)
    return get_profile_field_permissions(profile.id, object_type)


@router.put(
    "/{profile_id}/field-permissions",
    summary="Update field permissions of a profile",
    response_model=List[FieldPermission],
)
def update_field_permissions(
    profile_id: str,
    payload: FieldPermissionsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    profile = _load_readable_profile(profile_id, current_user)
    _require_profile_write(profile, current_user)

    saved = []
    try:
        for write in payload.permissions:
            validate_field_permission_write(write)
        for write in payload.permissions:
            row = set_profile_field_permission(profile.id, write)
            if row:
                saved.append(row)
    except InvalidPermissionWrite as e:
        raise HTTPException(400, str(e))

    return saved
