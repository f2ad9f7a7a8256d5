from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# OBJECT ACCESS LEVEL
# -----------------------------------------------------
class AccessLevel(BaseStrEnum):
    """
    Breadth of operations on an object type.
    Declaration order is the hierarchy: None < Read < ReadWrite < All.
    """

    none = "None"
    read = "Read"
    read_write = "ReadWrite"
    all = "All"


# -----------------------------------------------------
# FIELD ACCESS LEVEL
# -----------------------------------------------------
class FieldAccessLevel(BaseStrEnum):
    """Visibility/editability of one field: None < Read < ReadWrite."""

    none = "None"
    read = "Read"
    read_write = "ReadWrite"


# -----------------------------------------------------
# ACTION
# -----------------------------------------------------
class Action(BaseStrEnum):
    """Object-type action checked against a profile permission row."""

    create = "create"
    read = "read"
    edit = "edit"
    delete = "delete"
    view_all = "viewAll"


# -----------------------------------------------------
# SECURITY LEVEL
# -----------------------------------------------------
class SecurityLevel(BaseStrEnum):
    """Policy layer that produced a denial."""

    plan = "plan"
    profile = "profile"
    field = "field"


# -----------------------------------------------------
# SUBSCRIPTION STATUS
# -----------------------------------------------------
class SubscriptionStatus(BaseStrEnum):
    """Organization subscription status (mirrors the billing provider)."""

    active = "active"
    trialing = "trialing"
    past_due = "past_due"
    canceled = "canceled"
    expired = "expired"
