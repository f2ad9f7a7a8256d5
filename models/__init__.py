# -------------------------
# Enums
# -------------------------
from .enums import (
    AccessLevel,
    Action,
    FieldAccessLevel,
    SecurityLevel,
    SubscriptionStatus,
)

# -------------------------
# Access resolution
# -------------------------
from .access import (
    AccessCheckRequest,
    AccessDecision,
    AccessRequest,
    FieldCheck,
    FieldFilterRequest,
    PlanCheck,
    ProfileCheck,
    SecurityContext,
)

# -------------------------
# Profiles
# -------------------------
from .profile import (
    FieldPermission,
    FieldPermissionWrite,
    FieldPermissionsUpdate,
    ObjectPermission,
    ObjectPermissionWrite,
    ObjectPermissionsUpdate,
    Profile,
    ProfileAccessSummary,
)

# -------------------------
# Plans / features
# -------------------------
from .plan import (
    Feature,
    FeatureStatus,
    Plan,
    PlanFeature,
    PlanFeaturesUpdate,
    PlanLimits,
)

__all__ = [
    # enums
    "AccessLevel",
    "Action",
    "FieldAccessLevel",
    "SecurityLevel",
    "SubscriptionStatus",

    # access
    "AccessCheckRequest",
    "AccessDecision",
    "AccessRequest",
    "FieldCheck",
    "FieldFilterRequest",
    "PlanCheck",
    "ProfileCheck",
    "SecurityContext",

    # profiles
    "FieldPermission",
    "FieldPermissionWrite",
    "FieldPermissionsUpdate",
    "ObjectPermission",
    "ObjectPermissionWrite",
    "ObjectPermissionsUpdate",
    "Profile",
    "ProfileAccessSummary",

    # plans
    "Feature",
    "FeatureStatus",
    "Plan",
    "PlanFeature",
    "PlanFeaturesUpdate",
    "PlanLimits",
]
