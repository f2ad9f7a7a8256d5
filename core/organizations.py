# core/organizations.py

"""
Organization lookups, plan resolution and the explicit security context.
"""

from typing import Any, Dict, Optional

from core.config import settings
from core.logging_config import logger
from core.supabase_helpers import count, select, select_one
from models.access import SecurityContext
from models.enums import SubscriptionStatus


# Subscription chosen for an organization, in order of preference
SUBSCRIPTION_PRECEDENCE = [
    SubscriptionStatus.active,
    SubscriptionStatus.trialing,
]


def get_organization(organization_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not organization_id:
        return None
    return select_one("organizations", {"id": organization_id})


# -----------------------------------------------------
# Plan resolution
# -----------------------------------------------------

def get_organization_subscription(organization_id: str) -> Optional[Dict[str, Any]]:
    """active, then trialing, then the most recently created subscription."""
    subscriptions = select(
        "subscriptions",
        {"organization_id": organization_id},
        order_by="created_at",
        ascending=False,
    )
    if not subscriptions:
        return None

    for status in SUBSCRIPTION_PRECEDENCE:
        for sub in subscriptions:
            if sub.get("status") == status.value:
                return sub

    return subscriptions[0]


def resolve_organization_plan(organization_id: str) -> Optional[str]:
    """
    Plan name for an organization.

    No subscription at all -> DEFAULT_PLAN_NAME.
    A subscription whose plan row is missing -> None (plan cannot be fetched).
    """
    subscription = get_organization_subscription(organization_id)
    if subscription is None:
        return settings.DEFAULT_PLAN_NAME

    plan_id = subscription.get("plan_id")
    plan = select_one("plans", {"id": plan_id}) if plan_id else None
    if not plan:
        logger.warning(
            f"Organization {organization_id}: subscription {subscription.get('id')} "
            f"references missing plan {plan_id}"
        )
        return None

    return plan["name"]


# -----------------------------------------------------
# Usage against plan limits
# -----------------------------------------------------

def get_organization_usage(organization_id: str) -> Dict[str, int]:
    return {
        "lots": count("units", {"organization_id": organization_id}),
        "users": count("users", {"organization_id": organization_id}),
        "extranet_tenants": count(
            "tenants",
            {"organization_id": organization_id, "has_extranet_access": True},
        ),
    }


# -----------------------------------------------------
# Security context
# -----------------------------------------------------

def build_security_context(user) -> Optional[SecurityContext]:
    """
    Explicit identity for the resolver.
    None when the user has no organization or it does not exist.
    """
    organization = get_organization(getattr(user, "organization_id", None))
    if organization is None:
        return None

    return SecurityContext(
        user_id=user.id,
        organization_id=organization["id"],
        profile_id=getattr(user, "profile_id", None),
        plan_name=resolve_organization_plan(organization["id"]),
    )
