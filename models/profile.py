# models/profile.py

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ===============================================================
# PROFILE
# ===============================================================

class Profile(BaseModel):
    """Named permission bundle (organization_id None = global profile)."""

    id: str
    organization_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    is_system_profile: bool = False
    is_global: bool = False
    is_active: bool = True

    @field_validator("is_system_profile", "is_global", "is_active", mode="before")
    @classmethod
    def _null_bool(cls, v):
        return bool(v) if v is not None else False


# ===============================================================
# OBJECT PERMISSION
# ===============================================================

class ObjectPermission(BaseModel):
    """
    One row of profile_object_permissions.

    The boolean flags decide; access_level is the stored display value.
    Null flags read as False.
    """

    id: Optional[str] = None
    profile_id: str
    object_type: str
    access_level: Optional[str] = None
    can_create: bool = False
    can_read: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_view_all: bool = False

    @field_validator(
        "can_create", "can_read", "can_edit", "can_delete", "can_view_all",
        mode="before",
    )
    @classmethod
    def _null_is_false(cls, v):
        return v is True


class ObjectPermissionWrite(BaseModel):
    """Payload for one object permission (camelCase or snake_case keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    object_type: str = Field(..., min_length=1)
    access_level: Optional[str] = None  # ignored if it disagrees with the flags
    can_create: bool = False
    can_read: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_view_all: bool = False


class ObjectPermissionsUpdate(BaseModel):
    permissions: List[ObjectPermissionWrite]


# ===============================================================
# FIELD PERMISSION
# ===============================================================

class FieldPermission(BaseModel):
    """One row of profile_field_permissions."""

    id: Optional[str] = None
    profile_id: str
    object_type: str
    field_name: str
    access_level: Optional[str] = None
    can_read: bool = False
    can_edit: bool = False
    is_sensitive: bool = False

    @field_validator("can_read", "can_edit", "is_sensitive", mode="before")
    @classmethod
    def _null_is_false(cls, v):
        return v is True


class FieldPermissionWrite(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    object_type: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)
    access_level: Optional[str] = None
    can_read: bool = False
    can_edit: bool = False
    is_sensitive: bool = False


class FieldPermissionsUpdate(BaseModel):
    permissions: List[FieldPermissionWrite]


# ===============================================================
# PROFILE ACCESS SUMMARY
# ===============================================================

class ProfileAccessSummary(BaseModel):
    profile_id: Optional[str] = None
    profile_name: Optional[str] = None
    overall_access_level: str = "None"
    object_access_levels: Dict[str, str] = {}
    can_create_any: bool = False
    can_edit_any: bool = False
    can_delete_any: bool = False
    can_view_all_any: bool = False
    total_objects: int = 0
    accessible_objects: int = 0
    permissions: List[ObjectPermission] = []
