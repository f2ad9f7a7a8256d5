# core/access_levels.py

"""
Access-level hierarchy and permission-flag helpers.

The boolean flags on a permission row are the single source of truth for
allow/deny. Access levels are a projection of those flags, kept for display
and for "minimum access" comparisons.
"""

from typing import Iterable, Optional, Union

from models.enums import AccessLevel, Action, FieldAccessLevel
from models.profile import ObjectPermission


# Fixed ordering; comparisons use the index in this sequence, never the string
ACCESS_LEVEL_HIERARCHY = [
    AccessLevel.none,
    AccessLevel.read,
    AccessLevel.read_write,
    AccessLevel.all,
]

ACCESS_LEVEL_DESCRIPTIONS = {
    AccessLevel.none: "No access",
    AccessLevel.read: "Read only",
    AccessLevel.read_write: "Read and write",
    AccessLevel.all: "Full access (read, write, delete)",
}

ACTION_FLAGS = {
    Action.create: "can_create",
    Action.read: "can_read",
    Action.edit: "can_edit",
    Action.delete: "can_delete",
    Action.view_all: "can_view_all",
}


def to_access_level(value: Union[AccessLevel, str, None]) -> AccessLevel:
    """Unknown or absent values read as None."""
    if isinstance(value, AccessLevel):
        return value
    try:
        return AccessLevel(value)
    except ValueError:
        return AccessLevel.none


def access_level_index(value: Union[AccessLevel, str, None]) -> int:
    return ACCESS_LEVEL_HIERARCHY.index(to_access_level(value))


def compare_access_levels(
    level1: Union[AccessLevel, str, None],
    level2: Union[AccessLevel, str, None],
) -> int:
    """<0 if level1 is narrower than level2, 0 if equal, >0 if broader."""
    return access_level_index(level1) - access_level_index(level2)


def has_access_level_or_higher(
    level: Union[AccessLevel, str, None],
    minimum: Union[AccessLevel, str, None],
) -> bool:
    return compare_access_levels(level, minimum) >= 0


def most_permissive_level(levels: Iterable[Union[AccessLevel, str, None]]) -> AccessLevel:
    best = AccessLevel.none
    for level in levels:
        if compare_access_levels(level, best) > 0:
            best = to_access_level(level)
    return best


def access_level_description(level: Union[AccessLevel, str, None]) -> str:
    return ACCESS_LEVEL_DESCRIPTIONS[to_access_level(level)]


# ============================================================
# Flags -> level projection
# ============================================================

def derive_object_access_level(
    can_create: bool,
    can_read: bool,
    can_edit: bool,
    can_delete: bool,
    can_view_all: bool,
) -> AccessLevel:
    if not can_read:
        return AccessLevel.none
    if can_create and can_edit and can_delete and can_view_all:
        return AccessLevel.all
    if can_create or can_edit or can_delete:
        return AccessLevel.read_write
    return AccessLevel.read


def derive_field_access_level(can_read: bool, can_edit: bool) -> FieldAccessLevel:
    if not can_read:
        return FieldAccessLevel.none
    if can_edit:
        return FieldAccessLevel.read_write
    return FieldAccessLevel.read


def permission_access_level(permission: Optional[ObjectPermission]) -> AccessLevel:
    """Effective level of a row, computed from its flags (missing row = None)."""
    if permission is None:
        return AccessLevel.none
    return derive_object_access_level(
        permission.can_create,
        permission.can_read,
        permission.can_edit,
        permission.can_delete,
        permission.can_view_all,
    )


# ============================================================
# Action check
# ============================================================

def is_action_permitted(permission: Optional[ObjectPermission], action: Union[Action, str]) -> bool:
    """Map an action onto its flag. viewAll also requires can_read."""
    if permission is None:
        return False

    try:
        action = Action(action)
    except ValueError:
        return False

    allowed = getattr(permission, ACTION_FLAGS[action]) is True
    if action == Action.view_all:
        return allowed and permission.can_read
    return allowed
