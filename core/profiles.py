# core/profiles.py

"""
Profile lookups and the profile permission write path.

Read side returns typed rows; nothing here decides allow/deny.
Write side derives access_level from the boolean flags so the two
stored representations cannot drift apart.
"""

from typing import Any, Dict, Iterable, List, Optional

from core.access_levels import (
    derive_field_access_level,
    derive_object_access_level,
    most_permissive_level,
    permission_access_level,
)
from core.errors import InvalidPermissionWrite
from core.logging_config import logger
from core.permissions import DEFAULT_PROFILES
from core.supabase_helpers import safe_insert, safe_update, select, select_one
from models.enums import AccessLevel
from models.profile import (
    FieldPermission,
    FieldPermissionWrite,
    ObjectPermission,
    ObjectPermissionWrite,
    Profile,
    ProfileAccessSummary,
)


# ============================================================
# Profiles
# ============================================================

def get_profile(profile_id: str) -> Optional[Profile]:
    row = select_one("profiles", {"id": profile_id})
    return Profile(**row) if row else None


def get_profiles(organization_id: Optional[str], get_all: bool = False) -> List[Profile]:
    """
    Active profiles of an organization.
    get_all=True (super-admin listing) returns every profile, all orgs included.
    """
    if get_all:
        rows = select("profiles", order_by="name")
    else:
        if not organization_id:
            return []
        rows = select(
            "profiles",
            {"organization_id": organization_id, "is_active": True},
            order_by="name",
        )
    return [Profile(**row) for row in rows]


# ============================================================
# Object permissions (read)
# ============================================================

def get_profile_object_permissions(profile_id: str) -> List[ObjectPermission]:
    rows = select(
        "profile_object_permissions",
        {"profile_id": profile_id},
        order_by="object_type",
    )
    return [ObjectPermission(**row) for row in rows]


def get_object_permission(profile_id: str, object_type: str) -> Optional[ObjectPermission]:
    row = select_one(
        "profile_object_permissions",
        {"profile_id": profile_id, "object_type": object_type},
    )
    return ObjectPermission(**row) if row else None


def get_user_object_permissions(user) -> List[ObjectPermission]:
    """
    Object permissions of the user's profile.
    A user without an organization gets nothing, whatever profile is set.
    """
    organization_id = getattr(user, "organization_id", None)
    profile_id = getattr(user, "profile_id", None)

    if not organization_id or not profile_id:
        return []

    return get_profile_object_permissions(profile_id)


# ============================================================
# Field permissions (read)
# ============================================================

def get_field_permission(
    profile_id: str,
    object_type: str,
    field_name: str,
) -> Optional[FieldPermission]:
    row = select_one(
        "profile_field_permissions",
        {
            "profile_id": profile_id,
            "object_type": object_type,
            "field_name": field_name,
        },
    )
    return FieldPermission(**row) if row else None


def get_profile_field_permissions(
    profile_id: str,
    object_type: Optional[str] = None,
) -> List[FieldPermission]:
    eq = {"profile_id": profile_id}
    if object_type:
        eq["object_type"] = object_type

    rows = select("profile_field_permissions", eq, order_by="field_name")
    return [FieldPermission(**row) for row in rows]


def filter_fields_by_permissions(
    record: Dict[str, Any],
    field_permissions: Iterable[FieldPermission],
) -> Dict[str, Any]:
    """
    Drop the keys of `record` the profile cannot read.
    Fields without a permission row are kept (object-level access applies).
    """
    hidden = {p.field_name for p in field_permissions if not p.can_read}
    return {key: value for key, value in record.items() if key not in hidden}


def filter_readable_fields(
    profile_id: str,
    object_type: str,
    record: Dict[str, Any],
) -> Dict[str, Any]:
    return filter_fields_by_permissions(record, get_profile_field_permissions(profile_id, object_type))


# ============================================================
# Write path
# ============================================================

def validate_object_permission_write(write: ObjectPermissionWrite):
    """Any other flag without can_read is inconsistent."""
    others = (write.can_create, write.can_edit, write.can_delete, write.can_view_all)
    if not write.can_read and any(others):
        raise InvalidPermissionWrite(
            f"{write.object_type}: can_read is required when any other flag is set"
        )


def validate_field_permission_write(write: FieldPermissionWrite):
    if write.can_edit and not write.can_read:
        raise InvalidPermissionWrite(
            f"{write.object_type}.{write.field_name}: can_read is required when can_edit is set"
        )


def set_profile_object_permission(
    profile_id: str,
    write: ObjectPermissionWrite,
) -> Optional[ObjectPermission]:
    """
    Upsert one (profile, object_type) row.

    access_level is always stored as derived from the flags.
    Any write/delete/create/viewAll flag without can_read is rejected.
    """
    flags = {
        "can_create": write.can_create,
        "can_read": write.can_read,
        "can_edit": write.can_edit,
        "can_delete": write.can_delete,
        "can_view_all": write.can_view_all,
    }

    validate_object_permission_write(write)

    derived = derive_object_access_level(**flags)
    if write.access_level and write.access_level != derived.value:
        logger.warning(
            f"Profile {profile_id} / {write.object_type}: access_level "
            f"{write.access_level} disagrees with flags, storing {derived.value}"
        )

    data = {**flags, "access_level": derived.value}
    existing = get_object_permission(profile_id, write.object_type)

    if existing is None:
        row = safe_insert("profile_object_permissions", {
            "profile_id": profile_id,
            "object_type": write.object_type,
            **data,
        })
    else:
        row = safe_update(
            "profile_object_permissions",
            {"profile_id": profile_id, "object_type": write.object_type},
            data,
        )

    logger.info(f"Profile {profile_id}: {write.object_type} set to {derived.value}")
    return ObjectPermission(**row) if row else None


def set_profile_field_permission(
    profile_id: str,
    write: FieldPermissionWrite,
) -> Optional[FieldPermission]:
    """Upsert one (profile, object_type, field_name) row. can_edit requires can_read."""
    validate_field_permission_write(write)

    derived = derive_field_access_level(write.can_read, write.can_edit)
    if write.access_level and write.access_level != derived.value:
        logger.warning(
            f"Profile {profile_id} / {write.object_type}.{write.field_name}: "
            f"access_level {write.access_level} disagrees with flags, storing {derived.value}"
        )

    data = {
        "can_read": write.can_read,
        "can_edit": write.can_edit,
        "is_sensitive": write.is_sensitive,
        "access_level": derived.value,
    }
    key = {
        "profile_id": profile_id,
        "object_type": write.object_type,
        "field_name": write.field_name,
    }

    if get_field_permission(profile_id, write.object_type, write.field_name) is None:
        row = safe_insert("profile_field_permissions", {**key, **data})
    else:
        row = safe_update("profile_field_permissions", key, data)

    return FieldPermission(**row) if row else None


# ============================================================
# Profile summary
# ============================================================

def analyze_profile_access(profile_id: str) -> Optional[ProfileAccessSummary]:
    """Overall and per-object access of a profile; None if it does not exist."""
    profile = get_profile(profile_id)
    if profile is None:
        return None

    permissions = get_profile_object_permissions(profile_id)
    levels = {p.object_type: permission_access_level(p) for p in permissions}

    return ProfileAccessSummary(
        profile_id=profile.id,
        profile_name=profile.name,
        overall_access_level=most_permissive_level(levels.values()).value,
        object_access_levels={k: v.value for k, v in levels.items()},
        can_create_any=any(p.can_create and p.can_read for p in permissions),
        can_edit_any=any(p.can_edit and p.can_read for p in permissions),
        can_delete_any=any(p.can_delete and p.can_read for p in permissions),
        can_view_all_any=any(p.can_view_all and p.can_read for p in permissions),
        total_objects=len(permissions),
        accessible_objects=sum(1 for v in levels.values() if v != AccessLevel.none),
        permissions=permissions,
    )


# ============================================================
# Seeding
# ============================================================

def create_default_profiles(organization_id: str) -> List[Profile]:
    """
    Seed the default profiles (Owner, Accountant, Agent, Viewer) for an
    organization. Profiles that already exist by name, active or not, are
    left untouched.
    """
    existing = {
        row["name"] for row in select("profiles", {"organization_id": organization_id}, columns="id, name")
    }
    created = []

    for template in DEFAULT_PROFILES:
        if template["name"] in existing:
            continue

        row = safe_insert("profiles", {
            "organization_id": organization_id,
            "name": template["name"],
            "description": template["description"],
            "is_system_profile": True,
            "is_global": False,
            "is_active": True,
        })
        if not row:
            continue

        profile = Profile(**row)
        for object_type, flags in template["permissions"].items():
            set_profile_object_permission(
                profile.id,
                ObjectPermissionWrite(object_type=object_type, **flags),
            )

        created.append(profile)
        logger.info(f"Created default profile {profile.name} for organization {organization_id}")

    return created
