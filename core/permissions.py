# ============================================
# OBJECT TYPES + DEFAULT PROFILE PERMISSIONS
# ============================================

# Base (system) object types. Super-admins may define further object
# types at runtime; those are plain strings and resolve the same way.
BASE_OBJECT_TYPES = [
    "Property",
    "Unit",
    "Tenant",
    "Lease",
    "Payment",
    "Task",
    "Message",
    "JournalEntry",
    "User",
    "Organization",
    "Profile",
    "Report",
    "Activity",
]

GLOBAL_ADMIN_PROFILE_NAME = "Global Administrator"


def _flags(create=False, read=False, edit=False, delete=False, view_all=False):
    return {
        "can_create": create,
        "can_read": read,
        "can_edit": edit,
        "can_delete": delete,
        "can_view_all": view_all,
    }


FULL = _flags(True, True, True, True, True)
READ_OWN = _flags(read=True)
READ_ALL = _flags(read=True, view_all=True)
NONE = _flags()


# ============================================
# Profiles seeded for every new organization
# (object type -> flags; access levels are derived on write)
# ============================================
DEFAULT_PROFILES = [

    # =====================================================
    # OWNER: full access to operational data
    # =====================================================
    {
        "name": "Owner",
        "description": "Owner profile with full access",
        "permissions": {
            "Property": FULL,
            "Unit": FULL,
            "Tenant": FULL,
            "Lease": FULL,
            "Payment": FULL,
            "Task": FULL,
            "Message": FULL,
            "JournalEntry": FULL,
            "User": READ_OWN,
            "Organization": READ_OWN,
            "Profile": READ_OWN,
        },
    },

    # =====================================================
    # ACCOUNTANT: financial data
    # =====================================================
    {
        "name": "Accountant",
        "description": "Accountant profile with access to financial data",
        "permissions": {
            "Property": READ_ALL,
            "Unit": READ_ALL,
            "Tenant": READ_ALL,
            "Lease": READ_ALL,
            "Payment": FULL,
            "Task": _flags(create=True, read=True, edit=True, view_all=True),
            "Message": _flags(create=True, read=True, view_all=True),
            "JournalEntry": FULL,
            "User": NONE,
            "Organization": READ_OWN,
            "Profile": NONE,
        },
    },

    # =====================================================
    # AGENT: day-to-day operations, no deletes
    # =====================================================
    {
        "name": "Agent",
        "description": "Agent profile with operational access",
        "permissions": {
            "Property": _flags(create=True, read=True, edit=True, view_all=True),
            "Unit": _flags(create=True, read=True, edit=True, view_all=True),
            "Tenant": _flags(create=True, read=True, edit=True, view_all=True),
            "Lease": _flags(create=True, read=True, edit=True, view_all=True),
            "Payment": _flags(create=True, read=True, edit=True, view_all=True),
            "Task": _flags(create=True, read=True, edit=True, view_all=True),
            "Message": FULL,
            "JournalEntry": READ_ALL,
            "User": NONE,
            "Organization": READ_OWN,
            "Profile": NONE,
        },
    },

    # =====================================================
    # VIEWER: read only
    # =====================================================
    {
        "name": "Viewer",
        "description": "Read-only profile",
        "permissions": {
            "Property": READ_ALL,
            "Unit": READ_ALL,
            "Tenant": READ_ALL,
            "Lease": READ_ALL,
            "Payment": READ_ALL,
            "Task": READ_ALL,
            "Message": READ_ALL,
            "JournalEntry": READ_ALL,
            "User": NONE,
            "Organization": READ_OWN,
            "Profile": NONE,
        },
    },
]
